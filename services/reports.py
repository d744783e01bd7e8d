"""إحصائيات لوحة التحكم لنادي واحد"""

from datetime import date

from models.product import Product
from services.gateway import query
from services.inventory import LOW_STOCK_THRESHOLD
from services.money import money
from services.subscriptions import refresh_statuses


def _month_bounds(year, month):
    start = date(year, month, 1)
    end = date(year + 1, 1, 1) if month == 12 else date(year, month + 1, 1)
    return start.isoformat(), end.isoformat()


def _scalar(sql, params):
    rows = query(sql, params)
    if not rows:
        return 0
    return list(rows[0].values())[0] or 0


def dashboard_stats(gym, year, month, today=None):
    # الحالات المخزنة تُحدث قبل العد
    refresh_statuses(gym, today)
    start, end = _month_bounds(year, month)
    params = {'gym_id': gym.id, 'start': start, 'end': end}
    column = Product.quantity_column(gym.type)

    subscribers = query(
        'SELECT status, COUNT(*) AS count FROM subscribers '
        'WHERE gym_id = :gym_id GROUP BY status',
        params,
    )
    by_status = {row['status']: row['count'] for row in subscribers}

    total_products = _scalar('SELECT COUNT(*) FROM products', params)
    low_stock = _scalar(
        f'SELECT COUNT(*) FROM products WHERE COALESCE({column}, 0) < :threshold',
        {'threshold': LOW_STOCK_THRESHOLD},
    )

    invoices = query(
        'SELECT COUNT(*) AS count, COALESCE(SUM(total), 0) AS revenue FROM invoices '
        'WHERE gym_id = :gym_id AND created_at >= :start AND created_at < :end',
        params,
    )[0]
    subscription_revenue = _scalar(
        'SELECT COALESCE(SUM(price_paid), 0) FROM subscribers '
        'WHERE gym_id = :gym_id AND created_at >= :start AND created_at < :end',
        params,
    )
    profit = _scalar(
        'SELECT COALESCE(SUM(ii.total_price - ii.quantity * p.purchase_price), 0) '
        'FROM invoice_items ii '
        'JOIN invoices i ON i.id = ii.invoice_id '
        'JOIN products p ON p.id = ii.product_id '
        'WHERE i.gym_id = :gym_id AND i.created_at >= :start AND i.created_at < :end',
        params,
    )

    sales_revenue = money(invoices['revenue'])
    subscription_revenue = money(subscription_revenue)
    return {
        'total_subscribers': sum(by_status.values()),
        'active_subscribers': by_status.get('active', 0),
        'expiring_subscribers': by_status.get('expiring', 0),
        'expired_subscribers': by_status.get('expired', 0),
        'total_products': total_products,
        'low_stock_products': low_stock,
        'monthly_invoices': invoices['count'],
        'sales_revenue': sales_revenue,
        'subscription_revenue': subscription_revenue,
        'monthly_revenue': sales_revenue + subscription_revenue,
        'monthly_profit': money(profit),
    }
