"""
Sale and purchase posting tests
Stock movements, oversell protection and all-or-nothing posting
"""
from datetime import date
from decimal import Decimal

import pytest

from inventory_app import db
from inventory_app.buisness.core.errors import (
    InsufficientStockError,
    NotFoundError,
    ValidationError,
)
from inventory_app.buisness.core.field_parsing import MAX_INTEGER
from inventory_app.buisness.inventory.transaction_poster import TransactionPoster
from inventory_app.data.transactions.purchase import Purchase, PurchaseItem
from inventory_app.data.transactions.sale import Sale, SaleItem
from inventory_app.test.conftest import count_rows, stock_of


@pytest.fixture
def poster(app_context):
    return TransactionPoster(db.session)


def test_sale_decrements_stock_and_totals_line_items(app, staff_client, catalog):
    response = staff_client.post('/api/sales', json={
        'customer_id': catalog['customer_id'],
        'sale_date': '2024-03-15',
        'items': [{'product_id': catalog['hammer_id'], 'quantity': 2, 'price': '19.99'}],
    })

    assert response.status_code == 200
    body = response.get_json()
    assert body['success'] is True
    assert body['customer_id'] == catalog['customer_id']
    assert body['sale_date'] == '2024-03-15'
    assert body['items'][0]['line_total'] == '39.98'
    assert body['total_amount'] == '39.98'
    assert stock_of(app, catalog['hammer_id']) == 3

    detail = staff_client.get(f"/api/sales/{body['id']}").get_json()
    assert detail['customer_name'] == 'Jane Buyer'
    assert detail['items'][0]['product_name'] == 'Hammer'
    assert detail['items'][0]['line_total'] == '39.98'
    assert detail['total_amount'] == '39.98'


def test_sale_price_defaults_to_product_price(app, catalog, poster):
    result = poster.post_sale(
        catalog['customer_id'], '2024-03-15',
        [{'product_id': catalog['wrench_id'], 'quantity': 2}],
    )

    assert result.lines[0].price == Decimal('7.50')
    assert result.total_amount == Decimal('15.00')
    assert stock_of(app, catalog['wrench_id']) == 0


def test_purchase_increments_stock(app, staff_client, catalog):
    response = staff_client.post('/api/purchases', json={
        'supplier_id': catalog['supplier_id'],
        'purchase_date': '2024-03-10',
        'items': [
            {'product_id': catalog['hammer_id'], 'quantity': 10, 'price': '12.00'},
            {'product_id': catalog['wrench_id'], 'quantity': 3, 'price': '4.25'},
        ],
    })

    assert response.status_code == 200
    body = response.get_json()
    assert body['supplier_id'] == catalog['supplier_id']
    assert body['total_amount'] == '132.75'
    assert stock_of(app, catalog['hammer_id']) == 15
    assert stock_of(app, catalog['wrench_id']) == 5

    detail = staff_client.get(f"/api/purchases/{body['id']}").get_json()
    assert detail['supplier_name'] == 'Acme Supply'
    assert len(detail['items']) == 2


def test_oversell_is_rejected_without_side_effects(app, staff_client, catalog):
    response = staff_client.post('/api/sales', json={
        'customer_id': catalog['customer_id'],
        'sale_date': '2024-03-15',
        'items': [{'product_id': catalog['wrench_id'], 'quantity': 3}],
    })

    assert response.status_code == 400
    assert response.get_json() == {
        'success': False,
        'error': f"Insufficient stock for product ID {catalog['wrench_id']}. Available: 2, Requested: 3",
    }
    assert stock_of(app, catalog['wrench_id']) == 2
    assert count_rows(app, Sale) == 0
    assert count_rows(app, SaleItem) == 0


def test_failing_line_rolls_back_earlier_lines(app, catalog, poster):
    with pytest.raises(InsufficientStockError):
        poster.post_sale(catalog['customer_id'], '2024-03-15', [
            {'product_id': catalog['hammer_id'], 'quantity': 1},
            {'product_id': catalog['wrench_id'], 'quantity': 50},
        ])

    assert stock_of(app, catalog['hammer_id']) == 5
    assert stock_of(app, catalog['wrench_id']) == 2
    assert count_rows(app, Sale) == 0
    assert count_rows(app, SaleItem) == 0


def test_unknown_product_rolls_back_purchase(app, catalog, poster):
    with pytest.raises(NotFoundError):
        poster.post_purchase(catalog['supplier_id'], '2024-03-10', [
            {'product_id': catalog['hammer_id'], 'quantity': 4},
            {'product_id': 9999, 'quantity': 1},
        ])

    assert stock_of(app, catalog['hammer_id']) == 5
    assert count_rows(app, Purchase) == 0
    assert count_rows(app, PurchaseItem) == 0


def test_sale_can_take_the_last_unit(app, catalog, poster):
    poster.post_sale(
        catalog['customer_id'], '2024-03-15',
        [{'product_id': catalog['wrench_id'], 'quantity': 2}],
    )
    assert stock_of(app, catalog['wrench_id']) == 0

    with pytest.raises(InsufficientStockError):
        poster.post_sale(
            catalog['customer_id'], '2024-03-16',
            [{'product_id': catalog['wrench_id'], 'quantity': 1}],
        )
    assert stock_of(app, catalog['wrench_id']) == 0


@pytest.mark.parametrize('payload, message', [
    ({'sale_date': '2024-03-15', 'items': [{'product_id': 1, 'quantity': 1}]}, 'Customer is required'),
    ({'customer_id': 1, 'sale_date': '2024-03-15', 'items': []}, 'At least one item is required'),
    ({'customer_id': 1, 'sale_date': 'yesterday', 'items': [{'product_id': 1, 'quantity': 1}]},
     'sale_date must be a date in YYYY-MM-DD format'),
    ({'customer_id': 1, 'sale_date': '2024-03-15garbage', 'items': [{'product_id': 1, 'quantity': 1}]},
     'sale_date must be a date in YYYY-MM-DD format'),
    ({'customer_id': 1, 'sale_date': '2024-03-15', 'items': [{'product_id': 1, 'quantity': 0}]},
     'quantity must be at least 1'),
    ({'customer_id': 1, 'sale_date': '2024-03-15', 'items': [{'product_id': 1, 'quantity': 10 ** 20}]},
     f'quantity must be at most {MAX_INTEGER}'),
    ({'customer_id': 1, 'sale_date': '2024-03-15', 'items': [{'product_id': 1, 'quantity': 1, 'price': '1e400'}]},
     'price must be at most 99999999.99'),
    ({'customer_id': 10 ** 20, 'sale_date': '2024-03-15', 'items': [{'product_id': 1, 'quantity': 1}]},
     f'customer_id must be at most {MAX_INTEGER}'),
])
def test_sale_validation(app, staff_client, catalog, payload, message):
    response = staff_client.post('/api/sales', json=payload)
    assert response.status_code == 400
    assert response.get_json()['error'] == message
    assert count_rows(app, Sale) == 0
    assert stock_of(app, catalog['hammer_id']) == 5


@pytest.mark.parametrize('item', [
    {'quantity': 10 ** 20},
    {'quantity': 1, 'price': '1e400'},
    {'quantity': 1, 'price': '100000000'},
])
def test_out_of_range_purchase_line_is_rejected(app, staff_client, catalog, item):
    response = staff_client.post('/api/purchases', json={
        'supplier_id': catalog['supplier_id'],
        'purchase_date': '2024-03-10',
        'items': [dict(item, product_id=catalog['hammer_id'])],
    })

    assert response.status_code == 400
    assert response.get_json()['success'] is False
    assert stock_of(app, catalog['hammer_id']) == 5
    assert count_rows(app, Purchase) == 0
    assert count_rows(app, PurchaseItem) == 0


def test_purchase_cannot_overflow_stock(app, catalog, poster):
    with pytest.raises(ValidationError):
        poster.post_purchase(catalog['supplier_id'], '2024-03-10', [
            {'product_id': catalog['hammer_id'], 'quantity': MAX_INTEGER - 4},
        ])

    assert stock_of(app, catalog['hammer_id']) == 5
    assert count_rows(app, Purchase) == 0

    poster.post_purchase(catalog['supplier_id'], '2024-03-10', [
        {'product_id': catalog['hammer_id'], 'quantity': MAX_INTEGER - 5},
    ])
    assert stock_of(app, catalog['hammer_id']) == MAX_INTEGER


def test_timestamp_keeps_only_its_date(catalog, poster):
    result = poster.post_sale(
        catalog['customer_id'], '2024-03-15T10:30:00Z',
        [{'product_id': catalog['hammer_id'], 'quantity': 1}],
    )
    assert result.posted_on == date(2024, 3, 15)
    assert db.session.get(Sale, result.id).sale_date == date(2024, 3, 15)


def test_sale_for_unknown_customer_is_404(app, staff_client, catalog):
    response = staff_client.post('/api/sales', json={
        'customer_id': 9999,
        'sale_date': '2024-03-15',
        'items': [{'product_id': catalog['hammer_id'], 'quantity': 1}],
    })
    assert response.status_code == 404
    assert stock_of(app, catalog['hammer_id']) == 5


def test_negative_price_is_rejected(catalog, poster):
    with pytest.raises(ValidationError):
        poster.post_purchase(
            catalog['supplier_id'], '2024-03-10',
            [{'product_id': catalog['hammer_id'], 'quantity': 1, 'price': '-1'}],
        )


def test_missing_sale_is_404(staff_client):
    response = staff_client.get('/api/sales/42')
    assert response.status_code == 404
    assert response.get_json() == {'success': False, 'error': 'Sale not found'}


def test_huge_sale_id_is_404(staff_client):
    assert staff_client.get('/api/sales/99999999999999999999').status_code == 404
    assert staff_client.get('/api/purchases/99999999999999999999').status_code == 404
