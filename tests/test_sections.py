from decimal import Decimal

from statement_normalizer.config import Settings
from statement_normalizer.models import Currency, TransactionType
from statement_normalizer.sections import (
    Action,
    ParserState,
    derive_columns,
    initial_context,
    process_sections,
    step,
)

SETTINGS = Settings(cardholders=["Rahul", "Ritu"])

SCENARIO = [
    ["Domestic"],
    ["Date", "Debit", "Credit", "Description"],
    ["01-01-2020", "100", "", "Coffee Shop Delhi"],
    ["Ritu"],
    ["International"],
    ["Date", "Debit", "Credit", "Description"],
    ["02-02-2020", "", "50", "Hotel London"],
]


def test_multi_section_scenario():
    first, second = process_sections(SCENARIO, settings=SETTINGS)

    assert first.date == "01-01-2020"
    assert first.description == "Coffee Shop Delhi"
    assert first.debit == Decimal("100")
    assert first.credit is None
    assert first.card_name == "Rahul"
    assert first.transaction_type is TransactionType.DOMESTIC
    assert first.currency is Currency.INR
    assert "DELHI" in first.location

    assert second.debit is None
    assert second.credit == Decimal("50")
    assert second.card_name == "Ritu"
    assert second.transaction_type is TransactionType.INTERNATIONAL
    assert second.currency is Currency.USD
    assert second.location == "LONDON"


def test_rows_missing_date_or_amounts_are_dropped():
    grid = [
        ["Date", "Debit", "Credit", "Description"],
        ["", "100", "", "no date"],
        ["03-03-2020", "", "", "no amounts"],
        ["04-03-2020", "", "7", "kept"],
    ]
    rows = process_sections(grid, settings=SETTINGS)
    assert [r.description for r in rows] == ["kept"]


def test_unparseable_amount_still_emits_row():
    grid = [
        ["Date", "Debit", "Credit", "Description"],
        ["04-03-2020", "n/a", "", "odd amount"],
    ]
    (row,) = process_sections(grid, settings=SETTINGS)
    assert row.debit is None
    assert row.credit is None


def test_initial_context_defaults():
    ctx = initial_context(settings=SETTINGS)
    assert ctx.state is ParserState.AWAITING_COLUMN_HEADER
    assert ctx.transaction_type is TransactionType.DOMESTIC
    assert ctx.card_holder == "Rahul"


def test_step_precedence():
    ctx = initial_context(settings=SETTINGS)

    t = step(ctx, ["", "  "])
    assert t.action is Action.SKIP
    assert t.context == ctx

    t = step(ctx, ["International Transactions", ""])
    assert t.action is Action.SECTION_BANNER
    assert t.context.state is ParserState.AWAITING_COLUMN_HEADER
    assert t.context.transaction_type is TransactionType.INTERNATIONAL

    # A cardholder banner never changes the state.
    t2 = step(t.context, [" Ritu "])
    assert t2.action is Action.CARDHOLDER_BANNER
    assert t2.context.card_holder == "Ritu"
    assert t2.context.state is ParserState.AWAITING_COLUMN_HEADER

    t3 = step(t2.context, ["Date", "Details", "Debit", "Credit"])
    assert t3.action is Action.HEADER
    assert t3.context.state is ParserState.CONSUMING
    assert t3.context.columns.date == 0
    assert t3.context.columns.description == 1

    t4 = step(t3.context, ["09-09-2020", "Paris cafe EUR", "15", ""])
    assert t4.action is Action.EMIT
    assert t4.row.currency is Currency.EUR
    assert t4.row.card_name == "Ritu"
    assert t4.context == t3.context


def test_banner_match_is_case_sensitive():
    ctx = initial_context(settings=SETTINGS)
    t = step(ctx, ["domestic"])
    assert t.action is Action.HEADER


def test_preamble_rows_before_header_are_skipped():
    grid = [
        ["Statement for card XXXX 4321"],
        ["Date", "Details", "Debit", "Credit"],
        ["10/05/2021", "Big Bazaar Noida", "1,250.00", ""],
    ]
    ctx = initial_context(settings=SETTINGS)
    t = step(ctx, grid[0])
    assert t.context.state is ParserState.AWAITING_HEADER

    (row,) = process_sections(grid, settings=SETTINGS)
    assert row.date == "10-05-2021"
    assert row.debit == Decimal("1250.00")
    assert row.location == "NOIDA"


def test_wrapped_description_line_keeps_column_map():
    grid = [
        ["Date", "Description", "Debit", "Credit"],
        ["01-06-2021", "Swiggy Pune", "300", ""],
        ["", "KYC update charges", "", ""],
        ["02-06-2021", "Zomato Delhi", "40", ""],
    ]
    ctx = initial_context(settings=SETTINGS)
    ctx = step(ctx, grid[0]).context
    ctx = step(ctx, grid[1]).context

    t = step(ctx, grid[2])
    assert t.action is Action.DROP
    assert t.context.columns == ctx.columns

    rows = process_sections(grid, settings=SETTINGS)
    assert [r.description for r in rows] == ["Swiggy Pune", "Zomato Delhi"]
    assert rows[1].debit == Decimal("40")


def test_cardholder_named_in_description():
    grid = [
        ["Date", "Description", "Debit", "Credit"],
        ["03-07-2021", "Addon card Ritu - Myntra Bangalore", "999", ""],
        ["04-07-2021", "Croma Mumbai", "1500", ""],
    ]
    first, second = process_sections(grid, settings=SETTINGS)
    assert first.card_name == "Ritu"
    assert second.card_name == "Rahul"


def test_per_row_card_and_type_columns():
    grid = [
        ["Date", "Description", "Amount", "Card Holder", "DOMESTIC/INTL"],
        ["05/03/2021", "Hotel Paris EUR 120", "120.00", "Ritu S.", "INTERNATIONAL"],
        ["06/03/2021", "Metro Mumbai", "40", "", ""],
    ]
    first, second = process_sections(grid, settings=SETTINGS)
    assert first.card_name == "Ritu"
    assert first.transaction_type is TransactionType.INTERNATIONAL
    assert first.currency is Currency.EUR
    assert first.location == "PARIS"
    assert first.debit == Decimal("120.00")

    assert second.card_name == "Rahul"
    assert second.transaction_type is TransactionType.DOMESTIC
    assert second.currency is Currency.INR


def test_bank_phrasing_resolves_section_header():
    header = ["Txn Date", "Withdrawal Amount", "Deposit Amount", "Particulars"]
    columns = derive_columns(header, "ICICI")
    assert columns.date == 0
    assert columns.debit == {1}
    assert columns.credit == {2}
    assert columns.description == 3


def test_date_like_description_header_is_not_reused():
    columns = derive_columns(["Transaction Date", "Transaction Details", "Debit", "Credit"])
    assert columns.date == 0
    assert columns.description == 1


def test_configured_cardholders():
    settings = Settings(cardholders=["Asha", "Vikram"], default_cardholder="Vikram")
    grid = [
        ["Date", "Debit", "Description"],
        ["01-01-2022", "10", "Tea"],
        ["Asha"],
        ["02-01-2022", "20", "Coffee"],
    ]
    first, second = process_sections(grid, settings=settings)
    assert first.card_name == "Vikram"
    assert second.card_name == "Asha"
