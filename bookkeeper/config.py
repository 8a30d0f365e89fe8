"""Account code conventions of the chart of accounts.

Reports and the closing workflow find well-known accounts by code.
The codes can be overridden with `BOOKKEEPER_` environment variables,
for example `BOOKKEEPER_RETAINED_EARNINGS_CODE=3.3.01`.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="BOOKKEEPER_")

    # balance sheet roots
    assets_code: str = "1"
    liabilities_code: str = "2"
    equity_code: str = "3"

    # equity
    capital_code: str = "3.1"
    retained_earnings_code: str = "3.2.1.01"
    income_summary_code: str = "7.1.1.01"

    # working capital and debt
    current_assets_code: str = "1.1"
    cash_code: str = "1.1.1"
    receivables_code: str = "1.1.2"
    inventory_code: str = "1.1.3"
    current_liabilities_code: str = "2.1"
    suppliers_code: str = "2.1.1"
    non_current_liabilities_code: str = "2.2"

    # period end adjustments
    depreciation_expense_code: str = "5.2.3.01"
    accumulated_depreciation_code: str = "1.2.1.09"
    cost_of_sales_code: str = "6.1.1.01"
    inventory_account_code: str = "1.1.3.01"

    days_in_year: int = 360


settings = Settings()
