import pandas as pd
import pytest

from stormimpact.loader import (
    load_storm_data, resolve_columns, check_field_counts,
    DataFileError, ParseError, SchemaError, StormDataError,
)
from stormimpact.models import (
    REQUIRED_COLUMNS, EVTYPE, INJURIES, FATALITIES, PROPDMG, PROPDMGEXP, CROPDMGEXP,
)
from conftest import HEADER


def test_load_keeps_required_columns_in_canonical_order(storm_csv):
    df = load_storm_data(storm_csv)
    assert list(df.columns) == list(REQUIRED_COLUMNS)
    assert len(df) == 5
    assert df[EVTYPE].tolist() == ["TORNADO", "FLOOD", "TORNADO", "HAIL", "HEAT"]


def test_load_parses_numbers_and_keeps_codes_as_strings(storm_csv):
    df = load_storm_data(storm_csv)
    assert pd.api.types.is_numeric_dtype(df[INJURIES])
    assert pd.api.types.is_numeric_dtype(df[PROPDMG])
    assert df[PROPDMG].tolist() == [5, 2, 1.5, 10, 0]
    assert df[PROPDMGEXP].tolist()[:4] == ["K", "M", "B", "?"]
    assert pd.isna(df[PROPDMGEXP].iloc[4])
    assert pd.isna(df[CROPDMGEXP].iloc[0])
    assert df[CROPDMGEXP].iloc[2] == "k"


def test_load_accepts_digit_codes_as_strings(write_bz2):
    path = write_bz2("digits.csv.bz2", HEADER + "1,WIND,0,0,3,5,1,0\n")
    df = load_storm_data(path)
    assert df[PROPDMGEXP].tolist() == ["5"]
    assert df[CROPDMGEXP].tolist() == ["0"]


def test_load_resolves_alternative_header_names(write_bz2):
    header = "Event Type,deaths,injuries,PROPERTY_DAMAGE,PROPERTY_DAMAGE_EXP,CROP_DAMAGE,CROP_DAMAGE_EXP\n"
    path = write_bz2("alias.csv.bz2", header + "FLOOD,1,2,3,K,4,M\n")
    df = load_storm_data(path)
    assert list(df.columns) == list(REQUIRED_COLUMNS)
    assert df[FATALITIES].tolist() == [1]
    assert df[INJURIES].tolist() == [2]


def test_resolve_columns_prefers_exact_names():
    cols = ["EVTYPE", "FATALITIES", "INJURIES", "PROPDMG", "PROPDMGEXP", "CROPDMG", "CROPDMGEXP", "DEATHS"]
    assert resolve_columns(cols)[FATALITIES] == "FATALITIES"


def test_missing_file_is_data_file_error(tmp_path):
    with pytest.raises(DataFileError) as exc:
        load_storm_data(tmp_path / "nope.csv.bz2")
    assert isinstance(exc.value, OSError)
    assert isinstance(exc.value, StormDataError)


def test_corrupt_compression_is_data_file_error(tmp_path):
    path = tmp_path / "broken.csv.bz2"
    path.write_bytes(b"this is not a bz2 stream at all")
    with pytest.raises(DataFileError):
        load_storm_data(path)


def test_missing_column_is_schema_error(write_bz2):
    header = "EVTYPE,FATALITIES,INJURIES,PROPDMG,PROPDMGEXP,CROPDMG\n"
    path = write_bz2("short.csv.bz2", header + "FLOOD,1,2,3,K,4\n")
    with pytest.raises(SchemaError) as exc:
        load_storm_data(path)
    assert isinstance(exc.value, KeyError)
    assert "CROPDMGEXP" in str(exc.value)


def test_non_numeric_value_is_parse_error(write_bz2):
    path = write_bz2("bad.csv.bz2", HEADER + "1,FLOOD,0,many,2,M,1,B\n")
    with pytest.raises(ParseError) as exc:
        load_storm_data(path)
    assert "INJURIES" in str(exc.value)


def test_row_with_extra_fields_is_parse_error(write_bz2):
    rows = "1,FLOOD,0,2,2,M,1,B\n1,HAIL,0,2,2,M,1,B,x,y\n"
    path = write_bz2("wide.csv.bz2", HEADER + rows)
    with pytest.raises(ParseError):
        load_storm_data(path)


def test_row_with_missing_fields_is_parse_error(write_bz2):
    rows = "1,FLOOD,0,2,2,M,1,B\n1,HAIL,0\n"
    path = write_bz2("narrow.csv.bz2", HEADER + rows)
    with pytest.raises(ParseError) as exc:
        load_storm_data(path)
    assert "line 3" in str(exc.value)
    assert "saw 3" in str(exc.value)


def test_trailing_empty_field_is_not_missing(write_bz2):
    path = write_bz2("trailing.csv.bz2", HEADER + "1,FLOOD,0,2,2,M,1,\n\n")
    df = load_storm_data(path)
    assert len(df) == 1
    assert pd.isna(df[CROPDMGEXP].iloc[0])


def test_empty_file_is_schema_error(write_bz2):
    path = write_bz2("empty.csv.bz2", "")
    with pytest.raises(SchemaError):
        load_storm_data(path)


def test_check_field_counts_counts_records(storm_csv):
    assert check_field_counts(storm_csv) == 5
