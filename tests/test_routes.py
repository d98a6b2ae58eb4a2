# tests/test_routes.py

import json
import os
from io import BytesIO

from dsr_commission.calculator.rates import DEFAULT_CONFIG


def _upload(client, csv_text, filename='sales.csv', **fields):
    data = {'year': '2025', 'month': '6', 'as_of': '2025-06-30'}
    data.update(fields)
    data['file'] = (BytesIO(csv_text.encode('utf-8')), filename)
    return client.post('/api/commission/monthly-summary', data=data, content_type='multipart/form-data')


def test_health(client):
    response = client.get('/health')
    assert response.status_code == 200
    assert response.get_json() == {'status': 'ok'}


def test_rates(client):
    response = client.get('/api/commission/rates')
    assert response.status_code == 200
    assert response.get_json() == DEFAULT_CONFIG.describe()


def test_sale_commission(client):
    response = client.post('/api/commission/sale', json={
        'sale_id': 's1', 'sale_type': 'DO', 'package_name': 'Compact',
        'payment_status': 'paid', 'admin_approved': True, 'stock_id': 'STK-1',
    })
    assert response.status_code == 200
    assert response.get_json() == {
        'saleId': 's1',
        'status': 'eligible',
        'breakdown': {
            'upfrontCommission': 2000,
            'activationCommission': 1500,
            'packageCommission': 17000,
            'bonusCommission': 0,
            'totalCommission': 20500,
        },
    }


def test_sale_commission_pending_when_approval_missing(client):
    response = client.post('/api/commission/sale', json={
        'sale_type': 'FS', 'package_name': 'Premium', 'payment_status': 'paid',
    })
    body = response.get_json()
    assert body['status'] == 'pending-approval'
    assert body['reason'] == 'Awaiting admin approval'
    assert body['breakdown']['totalCommission'] == 0


def test_sale_commission_rejects_bad_requests(client):
    missing = client.post('/api/commission/sale', json={'sale_type': 'FS'})
    not_json = client.post('/api/commission/sale', data='nope')
    bad_flag = client.post('/api/commission/sale', json={
        'sale_type': 'FS', 'payment_status': 'paid', 'admin_approved': 'perhaps',
    })

    assert missing.status_code == 400
    assert missing.get_json() == {'errors': ['Missing required field(s): payment_status']}
    assert not_json.status_code == 400
    assert bad_flag.status_code == 400


def test_bonus(client):
    response = client.get('/api/commission/bonus?tier=shaba&sales=12')
    assert response.get_json() == {'tier': 'SHABA', 'sales': 12, 'bonus': 115000}

    # Unknown tiers earn nothing rather than failing
    response = client.get('/api/commission/bonus?tier=GOLD&sales=12')
    assert response.status_code == 200
    assert response.get_json() == {'tier': 'GOLD', 'sales': 12, 'bonus': 0}

    assert client.get('/api/commission/bonus?sales=12').status_code == 400
    assert client.get('/api/commission/bonus?tier=SHABA&sales=-1').status_code == 400
    assert client.get('/api/commission/bonus?tier=SHABA').status_code == 400


def test_tier(client):
    response = client.get('/api/commission/tier?sales=22&months=7')
    assert response.get_json() == {'sales': 22, 'months': 7, 'tier': 'TANZANITE'}

    response = client.get('/api/commission/tier?sales=3&months=2')
    assert response.get_json()['tier'] == 'CHUMA'

    assert client.get('/api/commission/tier?sales=ten&months=2').status_code == 400


def test_monthly_summary(app, client, sales_csv):
    joined = json.dumps({'dsr-1': '2024-01-01', 'dsr-2': '2025-06-01'})
    response = _upload(client, sales_csv, joined=joined)

    assert response.status_code == 200
    body = response.get_json()
    assert body['period'] == '2025-06'
    assert [rep['dsr_id'] for rep in body['representatives']] == ['dsr-1', 'dsr-2']

    first = body['representatives'][0]
    assert first['tier'] == 'SHABA'
    assert first['eligible_commission'] == 96250
    assert first['bonus_commission'] == 50000
    assert first['total_payable'] == 146250
    assert body['by_sale_type']['FS'] == {'sales': 3, 'earned': 71500, 'pending': 23500, 'potential': 101500}
    assert body['total_payable'] == 146250

    # The upload is not kept once it has been read
    assert os.listdir(app.config['UPLOAD_FOLDER']) == []


def test_monthly_summary_with_utc_joining_dates(client, sales_csv):
    joined = json.dumps({'dsr-1': '2024-01-01T00:00:00Z'})
    response = _upload(client, sales_csv, joined=joined, as_of='2025-06-30T00:00:00Z')

    assert response.status_code == 200
    first = response.get_json()['representatives'][0]
    assert first['months_working'] == 18
    assert first['total_payable'] == 146250


def test_monthly_summary_with_extra_export_columns(client):
    csv = (
        "sale_id,dsr_id,sale_type,package_option,payment_status,admin_approved,created_at,reason,status\n"
        "a,dsr-9,DO,Compact,paid,true,2025-06-03,walk-in,closed\n"
    )
    response = _upload(client, csv)

    assert response.status_code == 200
    rep = response.get_json()['representatives'][0]
    assert rep['dsr_id'] == 'dsr-9'
    assert rep['eligible_commission'] == 20500


def test_monthly_summary_reports_validation_errors(client):
    response = _upload(client, "sale_id,sale_type\na,FS\n")
    assert response.status_code == 400
    assert 'missing required columns' in response.get_json()['errors'][0]


def test_monthly_summary_rejects_bad_requests(client, sales_csv):
    assert _upload(client, sales_csv, filename='sales.txt').status_code == 400
    assert _upload(client, sales_csv, month='13').status_code == 400
    assert _upload(client, sales_csv, joined='[1, 2]').status_code == 400
    assert _upload(client, sales_csv, as_of='someday').status_code == 400


def test_app_uses_configured_rates(sales_csv):
    from config import TestingConfig
    from dsr_commission import create_app

    class GenerousConfig(TestingConfig):
        COMMISSION_CONFIG = DEFAULT_CONFIG.with_overrides(activation=2000)

    client = create_app(GenerousConfig).test_client()
    response = client.post('/api/commission/sale', json={
        'sale_type': 'DVS', 'payment_status': 'unpaid', 'admin_approved': True,
    })
    assert response.get_json()['breakdown']['totalCommission'] == 2000


def test_rates_command(app):
    result = app.test_cli_runner().invoke(args=['rates'])
    assert result.exit_code == 0
    assert 'COMPACT PLUS' in result.output
    assert 'TANZANITE' in result.output
