from datetime import date

from bookkeeper import Company, Entry

# Create company with the standard chart of accounts
company = Company.new("Acme", fiscal_year_start=date(2024, 1, 1))
cash = company.code("1.1.1.01")
capital = company.code("3.1.01")
sales = company.code("4.1.01")
refunds = company.code("4.2.01")
taxes = company.code("2.1.2.01")
salaries = company.code("5.2.1.01")

# Post entries
# fmt: off
entries = [
    Entry("Initial investment").amount(10_000).debit(cash).credit(capital),
    Entry("Sold services with tax").debit(cash, 6000).credit(sales, 5000).credit(taxes, 1000),
    Entry("Made client refund").double(debit=refunds, credit=cash, amount=500),
    Entry("Paid salaries").debit(salaries, 1500).credit(cash, 1500),
]
# fmt: on
company = company.post_many(entries, on=date(2024, 3, 31))
print(company.income_statement().model_dump_json(indent=2))

# Balance sheet holds before and after closing
assert company.balance_sheet().is_balanced()
company = company.close_period()
print(company.balance_sheet().model_dump_json(indent=2))
assert company.balance("3.2.1.01") == 3000
assert company.balance("1.1.1") == 14000

# Save to JSON file in current folder
company.save("acme.json", allow_overwrite=True)
