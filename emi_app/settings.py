import os

# Retail EMI limits (rupees)
EMI_MIN_AMOUNT = float(os.getenv("EMI_MIN_AMOUNT", "1000"))
EMI_MAX_AMOUNT = float(os.getenv("EMI_MAX_AMOUNT", "500000"))

# Bureau score floor and max share of monthly income an EMI may take
EMI_MIN_CREDIT_SCORE = int(os.getenv("EMI_MIN_CREDIT_SCORE", "650"))
EMI_MAX_INCOME_RATIO = float(os.getenv("EMI_MAX_INCOME_RATIO", "0.5"))

# Months used for the coarse EMI estimate in the income check
EMI_ESTIMATE_MONTHS = 12

# Tenures commonly offered (months)
STANDARD_TENURES = [3, 6, 9, 12, 18, 24, 36]
