# ==============================================================================
# dsr_commission/main/routes.py
# ------------------------------------------------------------------------------
# JSON endpoints exposing the commission calculator to reporting callers.
# ==============================================================================

import os
import uuid

import pandas as pd
from flask import current_app, jsonify, request
from werkzeug.utils import secure_filename

from dsr_commission import get_commission_config
from dsr_commission.calculator.engine import (calculate_bonus_commission, calculate_sale_commission,
                                              get_dsr_tier)
from dsr_commission.calculator.summary import (sales_in_month, score_sales, summarize_by_sale_type,
                                               summarize_month)
from dsr_commission.calculator.validator import validate_sales_file
from dsr_commission.main import bp
from dsr_commission.main.utils import (RequestError, allowed_file, parse_approval,
                                       parse_joined_dates, require_int)


@bp.errorhandler(RequestError)
def handle_request_error(error):
    return jsonify({'errors': [str(error)]}), 400


@bp.route('/health')
def health():
    return jsonify({'status': 'ok'})


@bp.route('/api/commission/rates')
def rates():
    return jsonify(get_commission_config(current_app).describe())


@bp.route('/api/commission/sale', methods=['POST'])
def sale_commission():
    """Commission status and breakdown for a single sale."""
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise RequestError('Request body must be a JSON object.')

    missing = [name for name in ('sale_type', 'payment_status') if not payload.get(name)]
    if missing:
        raise RequestError(f"Missing required field(s): {', '.join(missing)}")

    commission = calculate_sale_commission(
        payload['sale_type'],
        payload.get('package_name'),
        payload['payment_status'],
        parse_approval(payload.get('admin_approved')),
        stock_id=payload.get('stock_id'),
        sale_id=str(payload.get('sale_id') or ''),
        config=get_commission_config(current_app),
    )
    return jsonify(commission.to_dict())


@bp.route('/api/commission/bonus')
def bonus_commission():
    # Unknown tiers earn no bonus, the same as in the calculator
    tier = request.args.get('tier', '').strip().upper()
    if not tier:
        raise RequestError("'tier' is required.")
    sales = require_int(request.args, 'sales')
    bonus = calculate_bonus_commission(tier, sales, get_commission_config(current_app))
    return jsonify({'tier': tier, 'sales': sales, 'bonus': bonus})


@bp.route('/api/commission/tier')
def dsr_tier():
    sales = require_int(request.args, 'sales')
    months = require_int(request.args, 'months')
    return jsonify({'sales': sales, 'months': months, 'tier': get_dsr_tier(sales, months).value})


@bp.route('/api/commission/monthly-summary', methods=['POST'])
def monthly_summary():
    """
    Monthly commission summary from an uploaded sales export.

    Expects a multipart upload with `file` (.csv or .xlsx) and the form
    fields `year`, `month`, and optionally `as_of` and `joined` (a JSON
    object of dsr_id to joining date).
    """
    year = require_int(request.form, 'year', minimum=2000)
    month = require_int(request.form, 'month', minimum=1)
    if month > 12:
        raise RequestError("'month' must be between 1 and 12.")

    joined = parse_joined_dates(request.form.get('joined'))
    try:
        joined_dates = {dsr_id: pd.Timestamp(joined_on) for dsr_id, joined_on in joined.items()}
        as_of = pd.Timestamp(request.form['as_of']) if request.form.get('as_of') else None
    except (TypeError, ValueError) as e:
        raise RequestError(f"Invalid date: {e}")

    file = request.files.get('file')
    if file is None or file.filename == '':
        raise RequestError('No sales file was uploaded.')
    if not allowed_file(file.filename, current_app.config['ALLOWED_EXTENSIONS']):
        raise RequestError('File type not allowed. Upload a .csv or .xlsx file.')

    upload_folder = current_app.config['UPLOAD_FOLDER']
    os.makedirs(upload_folder, exist_ok=True)
    filepath = os.path.join(upload_folder, f"{uuid.uuid4().hex}-{secure_filename(file.filename)}")
    file.save(filepath)
    try:
        sales_df, errors = validate_sales_file(filepath)
    finally:
        os.remove(filepath)

    if errors:
        return jsonify({'errors': errors}), 400

    config = get_commission_config(current_app)
    try:
        scored = score_sales(sales_df, config)
        representatives = summarize_month(scored, year, month, joined_dates=joined_dates,
                                          as_of=as_of, config=config)
        by_sale_type = summarize_by_sale_type(sales_in_month(scored, year, month))
    except Exception as e:
        current_app.logger.error(f"Monthly summary failed for {file.filename}: {e}", exc_info=True)
        return jsonify({'errors': ['An unexpected error occurred while calculating commissions.']}), 500

    return jsonify({
        'period': f"{year}-{month:02d}",
        'representatives': [summary.to_dict() for summary in representatives.values()],
        'by_sale_type': by_sale_type,
        'total_payable': sum(summary.total_payable for summary in representatives.values()),
    })
