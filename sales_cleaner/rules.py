"""
Deterministic cleaning rules.

This file exists to make the accepted vocabulary and formats explicit.
"""

TARGET_ENCODING = "utf-8-sig"  # UTF-8 with BOM
DELIMITER = ","
EXPORT_FILENAME = "ventas_clean.csv"

VALID_TIME_SLOTS = ("Desayuno", "Comida")
VALID_CATEGORIES = ("Bebida", "Entrante", "Principal", "Postre")

# Raw input columns read by the cleaner
COL_DATE = "fecha"
COL_TIME_SLOT = "franja"
COL_PRODUCT = "producto"
COL_CATEGORY = "familia"
COL_UNITS = "unidades"
COL_UNIT_PRICE = "precio_unitario"
COL_AMOUNT = "importe"

# Export / preview column order for clean records
CLEAN_COLUMNS = (
    COL_DATE,
    COL_TIME_SLOT,
    COL_PRODUCT,
    COL_CATEGORY,
    COL_UNITS,
    COL_UNIT_PRICE,
    COL_AMOUNT,
)

# Accepted numbers must have a decimal exponent within +/- this bound
MAX_NUMBER_EXPONENT = 100
