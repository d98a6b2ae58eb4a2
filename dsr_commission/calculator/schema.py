# ==============================================================================
# dsr_commission/calculator/schema.py
# ------------------------------------------------------------------------------
# Defines the expected structure of an exported sales sheet.
# This schema is the single source of truth for the validator.
# ==============================================================================

SALES_SHEET = {
    'required_columns': [
        'sale_id', 'dsr_id', 'sale_type', 'payment_status',
        'admin_approved', 'created_at'
    ],
    # Filled with blanks when the export leaves them out
    'optional_columns': ['package_option', 'stock_id'],
    'date_columns': ['created_at'],
    'boolean_columns': ['admin_approved'],
    'text_columns': ['sale_id', 'dsr_id', 'sale_type', 'payment_status', 'package_option', 'stock_id'],
}

# Accepted spellings for boolean cells; blank means "not decided yet"
TRUE_VALUES = {'true', 'yes', '1', 't', 'y'}
FALSE_VALUES = {'false', 'no', '0', 'f', 'n'}

SUPPORTED_EXTENSIONS = {'.csv', '.xlsx'}
