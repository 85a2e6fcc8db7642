import bz2

import matplotlib
matplotlib.use("Agg")

import pytest

HEADER = "STATE__,EVTYPE,FATALITIES,INJURIES,PROPDMG,PROPDMGEXP,CROPDMG,CROPDMGEXP\n"


@pytest.fixture
def write_bz2(tmp_path):
    """Return a helper that writes text to a bz2 file under tmp_path."""
    def _write(name, text):
        path = tmp_path / name
        with bz2.open(path, "wt", encoding="utf-8") as f:
            f.write(text)
        return str(path)
    return _write


@pytest.fixture
def storm_csv(write_bz2):
    """Small storm events file in the export's layout (extra column included)."""
    rows = [
        "1,TORNADO,1,10,5,K,0,",
        "1,FLOOD,0,2,2,M,1,B",
        "2,TORNADO,2,5,1.5,B,3,k",
        "2,HAIL,0,0,10,?,2,M",
        "3,HEAT,4,0,0,,0,",
    ]
    return write_bz2("storm.csv.bz2", HEADER + "\n".join(rows) + "\n")
