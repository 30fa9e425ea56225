import pytest

from machine_translations.core.exceptions import InvalidSelection, SelectionCancelled
from machine_translations.services.table_selector import TableSelector, is_translation_table


class FakeInspector:
    def __init__(self, tables):
        self.tables = tables

    def list_tables(self):
        return list(self.tables)


ALL_TABLES = ["product", "product_translation", "category_translation", "language", "translation"]


def test_is_translation_table():
    assert is_translation_table("product_translation")
    assert not is_translation_table("product")
    assert not is_translation_table("_translation")
    assert not is_translation_table("translation")


def test_explicit_tables_are_filtered_by_suffix(caplog):
    selector = TableSelector(FakeInspector(ALL_TABLES))

    tables = selector.select_tables(["product_translation", "product", "media_translation"])

    assert tables == ["product_translation", "media_translation"]
    assert "product" in caplog.text


def test_explicit_selection_without_translation_tables_fails():
    selector = TableSelector(FakeInspector(ALL_TABLES))

    with pytest.raises(InvalidSelection):
        selector.select_tables(["product", "language"])


def test_all_translation_tables_after_confirmation():
    asked = []

    def confirm(tables):
        asked.append(tables)
        return True

    selector = TableSelector(FakeInspector(ALL_TABLES), confirm=confirm)

    tables = selector.select_tables([])

    assert tables == ["product_translation", "category_translation"]
    assert asked == [["product_translation", "category_translation"]]


def test_declined_confirmation_cancels():
    selector = TableSelector(FakeInspector(ALL_TABLES), confirm=lambda tables: False)

    with pytest.raises(SelectionCancelled):
        selector.select_tables(None)


def test_full_set_is_never_processed_without_confirmation_callback():
    selector = TableSelector(FakeInspector(ALL_TABLES))

    with pytest.raises(SelectionCancelled):
        selector.select_tables()


def test_database_without_translation_tables_fails():
    selector = TableSelector(FakeInspector(["product", "language"]), confirm=lambda tables: True)

    with pytest.raises(InvalidSelection) as exc_info:
        selector.select_tables()
    assert not isinstance(exc_info.value, SelectionCancelled)
