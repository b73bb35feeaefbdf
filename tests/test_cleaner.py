import datetime as dt
from decimal import Decimal

from sales_cleaner.cleaner import Accepted, Rejected, clean, clean_with_report, validate_record
from sales_cleaner.models import Category, TimeSlot
from sales_cleaner.parser import parse

HEADER = "fecha,franja,producto,familia,unidades,precio_unitario"


def _raw(**overrides):
    record = {
        "fecha": "2024-01-05",
        "franja": "desayuno",
        "producto": "Café",
        "familia": "bebida",
        "unidades": "2",
        "precio_unitario": "1.5",
    }
    record.update(overrides)
    return record


def test_valid_row_is_normalized():
    cleaned = clean(parse(HEADER + "\n2024-01-05,desayuno,Café,bebida,2,1.5"))

    assert len(cleaned) == 1
    record = cleaned[0]
    assert record.date == dt.date(2024, 1, 5)
    assert record.time_slot is TimeSlot.DESAYUNO
    assert record.category is Category.BEBIDA
    assert record.product == "Café"
    assert record.units == Decimal("2")
    assert record.unit_price == Decimal("1.5")
    assert record.amount == Decimal("3.0")
    assert record.as_row()["fecha"] == "2024-01-05"


def test_product_is_trimmed_case_preserved():
    result = validate_record(_raw(producto="  Tostada CON tomate "))
    assert isinstance(result, Accepted)
    assert result.record.product == "Tostada CON tomate"


def test_zero_units_is_rejected():
    before = clean([_raw()])
    after = clean([_raw(), _raw(producto="Zumo", unidades="0")])
    assert len(after) == len(before)


def test_identical_rows_are_kept_once():
    assert len(clean([_raw()])) == 1
    assert len(clean([_raw(), _raw()])) == 1


def test_rows_equal_after_normalization_are_duplicates():
    rows = [
        _raw(),
        _raw(franja=" DESAYUNO", familia="BEBIDA ", producto=" Café", unidades="2.0"),
    ]
    assert len(clean(rows)) == 1


def test_out_of_vocabulary_time_slot_is_rejected():
    result = validate_record(_raw(franja="Merienda"))
    assert result == Rejected("invalid_time_slot", "franja", "Merienda")


def test_out_of_vocabulary_category_is_rejected():
    result = validate_record(_raw(familia="Snack"))
    assert isinstance(result, Rejected)
    assert result.issue == "invalid_category"


def test_each_field_check():
    cases = {
        "invalid_date": _raw(fecha="ayer"),
        "empty_product": _raw(producto="   "),
        "invalid_units": _raw(unidades="dos"),
        "invalid_unit_price": _raw(precio_unitario="-1"),
    }
    for issue, raw in cases.items():
        result = validate_record(raw)
        assert isinstance(result, Rejected)
        assert result.issue == issue


def test_missing_fields_from_short_line_are_rejected():
    cleaned = clean(parse(HEADER + "\n2024-01-05,desayuno,Café"))
    assert cleaned == []


def test_fractional_units_are_accepted():
    result = validate_record(_raw(unidades="0.5", precio_unitario="3"))
    assert isinstance(result, Accepted)
    assert result.record.amount == Decimal("1.5")


def test_survivors_keep_input_order():
    rows = [
        _raw(producto="C"),
        _raw(producto="bad", unidades="0"),
        _raw(producto="A"),
        _raw(producto="C"),
        _raw(producto="B"),
    ]
    assert [r.product for r in clean(rows)] == ["C", "A", "B"]


def test_cleaned_never_larger_than_raw():
    rows = [_raw(), _raw(), _raw(fecha="x"), _raw(producto="Té"), {}]
    assert len(clean(rows)) <= len(rows)
    assert clean([]) == []


def test_clean_with_report_lists_reasons():
    rows = [_raw(), _raw(), _raw(franja="Merienda"), _raw(fecha="05/01/2024")]
    cleaned, report = clean_with_report(rows)

    assert cleaned == clean(rows)
    assert report.rows_before == 4
    assert report.rows_after == 1
    assert [(item.row, item.issue) for item in report.rejected] == [
        (2, "duplicate"),
        (3, "invalid_time_slot"),
        (4, "invalid_date"),
    ]
    assert report.rejected[1].column == "franja"
    assert all(item.action == "dropped" for item in report.rejected)


def test_separate_runs_do_not_share_dedup_state():
    assert len(clean([_raw()])) == 1
    assert len(clean([_raw()])) == 1


def test_amount_is_exact_beyond_default_precision():
    result = validate_record(_raw(unidades="1.0000000000000000000000000001", precio_unitario="3"))
    assert isinstance(result, Accepted)
    assert result.record.amount == Decimal("3.0000000000000000000000000003")


def test_out_of_range_magnitude_is_rejected():
    assert validate_record(_raw(unidades="9e999999")) == Rejected("invalid_units", "unidades", "9e999999")
    result = validate_record(_raw(precio_unitario="1e-200"))
    assert isinstance(result, Rejected)
    assert result.issue == "invalid_unit_price"
