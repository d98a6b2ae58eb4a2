# ==============================================================================
# dsr_commission/calculator/validator.py
# ------------------------------------------------------------------------------
# Handles the validation of an uploaded sales sheet's structure and values.
# ==============================================================================

import os

import pandas as pd

from .schema import FALSE_VALUES, SALES_SHEET, SUPPORTED_EXTENSIONS, TRUE_VALUES


def _read_table(filepath):
    extension = os.path.splitext(filepath)[1].lower()
    if extension == '.csv':
        return pd.read_csv(filepath, dtype=str, keep_default_na=False)
    return pd.read_excel(filepath, dtype=str, keep_default_na=False)


def _is_blank(value):
    if value is None:
        return True
    if isinstance(value, float) and pd.isna(value):
        return True
    return str(value).strip() == ''


def _parse_boolean(value):
    """Returns (parsed, ok). Blank cells parse to None."""
    if isinstance(value, bool):
        return value, True
    if _is_blank(value):
        return None, True
    text = str(value).strip().lower()
    if text in TRUE_VALUES:
        return True, True
    if text in FALSE_VALUES:
        return False, True
    return None, False


def _clean_text(value):
    if _is_blank(value):
        return None
    return str(value).strip()


def validate_sales_frame(df):
    """
    Validates and normalises an in-memory sales table.

    Args:
        df (pd.DataFrame): Raw sales rows, one per sale.

    Returns:
        tuple: A tuple containing:
            - pd.DataFrame: The normalised frame if validation is successful.
            - list: A list of human-readable error messages if validation fails.
    """
    errors = []

    # 1. Check for required columns
    missing_columns = [col for col in SALES_SHEET['required_columns'] if col not in df.columns]
    if missing_columns:
        errors.append(f"The sales sheet is missing required columns: {', '.join(missing_columns)}")
        return None, errors

    df = df.copy()
    for col in SALES_SHEET['optional_columns']:
        if col not in df.columns:
            df[col] = None

    # 2. Normalise text columns; None stands in for every kind of blank
    for col in SALES_SHEET['text_columns']:
        df[col] = pd.Series([_clean_text(value) for value in df[col]], index=df.index, dtype=object)

    # 3. Check boolean columns
    for col in SALES_SHEET['boolean_columns']:
        parsed_values = []
        for index, value in df[col].items():
            parsed, ok = _parse_boolean(value)
            if not ok:
                errors.append(
                    f"Row {index + 2}: value '{value}' in column '{col}' must be true, false or blank."
                )
            parsed_values.append(parsed)
        df[col] = pd.Series(parsed_values, index=df.index, dtype=object)

    # 4. Check date columns
    for col in SALES_SHEET['date_columns']:
        parsed_dates = pd.to_datetime(df[col], errors='coerce', utc=True, format='mixed')
        invalid_rows = df[parsed_dates.isna()]
        for index in invalid_rows.index:
            value = invalid_rows.loc[index, col]
            errors.append(f"Row {index + 2}: value '{value}' in column '{col}' must be a date.")
        df[col] = parsed_dates.dt.tz_localize(None)

    if errors:
        return None, errors

    return df, []


def validate_sales_file(filepath):
    """
    Validates the structure and basic data types of an uploaded sales file.

    Args:
        filepath (str): The path to the uploaded .csv or .xlsx file.

    Returns:
        tuple: (DataFrame or None, list of error messages).
    """
    extension = os.path.splitext(filepath)[1].lower()
    if extension not in SUPPORTED_EXTENSIONS:
        return None, [f"Unsupported file type '{extension}'. Upload a .csv or .xlsx file."]

    try:
        df = _read_table(filepath)
    except Exception as e:
        return None, [f"The sales file is invalid or cannot be read. Technical error: {e}"]

    return validate_sales_frame(df)
