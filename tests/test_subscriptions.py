from datetime import date
from decimal import Decimal

import pytest

from models import db
from models.subscription import Subscriber, SubscriptionType
from services import subscriptions
from services.errors import ReferentialIntegrityError, ValidationError
from services.subscriptions import (
    add_months,
    compute_end_date,
    derive_status,
    renew,
    use_session,
)

from conftest import TODAY


def test_add_months_clamps_to_month_end():
    assert add_months(date(2023, 1, 31), 1) == date(2023, 2, 28)
    assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)
    assert add_months(date(2024, 11, 30), 3) == date(2025, 2, 28)
    assert add_months(date(2024, 5, 15), 12) == date(2025, 5, 15)


def test_monthly_end_date_uses_duration():
    st = SubscriptionType(name='3m', type='monthly', duration_months=3, price=Decimal('1'))
    assert compute_end_date(date(2024, 1, 10), st) == date(2024, 4, 10)


def test_session_end_date_is_three_months():
    st = SubscriptionType(name='s', type='session', duration_months=1, session_count=12,
                          price=Decimal('1'))
    assert compute_end_date(date(2024, 1, 10), st) == date(2024, 4, 10)


def test_monthly_without_duration_is_rejected():
    st = SubscriptionType(name='bad', type='monthly', duration_months=0, price=Decimal('1'))
    with pytest.raises(ValidationError):
        compute_end_date(date(2024, 1, 10), st)


@pytest.mark.parametrize('kind,sessions,end,expected', [
    ('monthly', None, date(2024, 2, 15), 'active'),
    ('monthly', None, date(2024, 1, 22), 'expiring'),
    ('monthly', None, date(2024, 1, 15), 'expiring'),
    ('monthly', None, date(2024, 1, 14), 'expired'),
    ('session', 0, date(2024, 3, 1), 'expired'),
    ('session', 3, date(2024, 3, 1), 'active'),
    ('session', 3, date(2024, 1, 20), 'expiring'),
    # اشتراك الجلسات لا ينتهي بالتاريخ
    ('session', 3, date(2024, 1, 1), 'active'),
])
def test_derive_status(kind, sessions, end, expected):
    assert derive_status(kind, sessions, end, TODAY) == expected


def test_create_session_subscriber(male_gym, session_type):
    subscriber = subscriptions.create_subscriber(male_gym, 'Ali', '0912', session_type.id,
                                                 start_date=TODAY, today=TODAY)
    assert subscriber.end_date == date(2024, 4, 15)
    assert subscriber.remaining_sessions == 12
    assert subscriber.status == 'active'
    assert subscriber.price_paid == Decimal('3600.00')


def test_create_monthly_subscriber_has_no_sessions(male_gym, monthly_type):
    subscriber = subscriptions.create_subscriber(male_gym, 'Omar', None, monthly_type.id,
                                                 start_date=date(2024, 1, 31), today=date(2024, 1, 31))
    assert subscriber.remaining_sessions is None
    assert subscriber.end_date == date(2024, 2, 29)


def test_inactive_type_cannot_be_subscribed(male_gym, monthly_type):
    subscriptions.set_subscription_type_active(male_gym, monthly_type.id, False)
    with pytest.raises(ValidationError):
        subscriptions.create_subscriber(male_gym, 'Omar', None, monthly_type.id, today=TODAY)


def test_type_from_other_gym_is_rejected(female_gym, monthly_type):
    with pytest.raises(ValidationError):
        subscriptions.create_subscriber(female_gym, 'Sara', None, monthly_type.id, today=TODAY)


def test_last_session_expires_subscriber(male_gym, session_type):
    subscriber = subscriptions.create_subscriber(male_gym, 'Ali', None, session_type.id,
                                                 start_date=TODAY, today=TODAY)
    subscriber.remaining_sessions = 1
    db.session.commit()

    subscriptions.record_session_use(male_gym, subscriber.id, today=TODAY)
    assert subscriber.remaining_sessions == 0
    assert subscriber.status == 'expired'

    with pytest.raises(ValidationError):
        subscriptions.record_session_use(male_gym, subscriber.id, today=TODAY)
    assert db.session.get(Subscriber, subscriber.id).remaining_sessions == 0


def test_use_session_rejects_monthly(male_gym, monthly_type):
    subscriber = subscriptions.create_subscriber(male_gym, 'Omar', None, monthly_type.id, today=TODAY)
    with pytest.raises(ValidationError):
        use_session(subscriber)


def test_renew_resets_period_and_keeps_price(male_gym, session_type):
    subscriber = subscriptions.create_subscriber(male_gym, 'Ali', None, session_type.id,
                                                 start_date=date(2023, 9, 1), price_paid='3000',
                                                 today=TODAY)
    subscriber.remaining_sessions = 0
    renew(subscriber, session_type, today=TODAY)
    assert subscriber.start_date == TODAY
    assert subscriber.end_date == date(2024, 4, 15)
    assert subscriber.remaining_sessions == 12
    assert subscriber.status == 'active'
    assert subscriber.price_paid == Decimal('3000.00')


def test_renew_subscriber_with_new_type(male_gym, session_type, monthly_type):
    subscriber = subscriptions.create_subscriber(male_gym, 'Ali', None, session_type.id, today=TODAY)
    subscriptions.renew_subscriber(male_gym, subscriber.id, monthly_type.id, today=TODAY,
                                   price_paid='3000')
    assert subscriber.subscription_type_id == monthly_type.id
    assert subscriber.remaining_sessions is None
    assert subscriber.end_date == date(2024, 2, 15)
    assert subscriber.price_paid == Decimal('3000.00')


def test_list_refreshes_stored_status(male_gym, monthly_type):
    subscriber = subscriptions.create_subscriber(male_gym, 'Omar', None, monthly_type.id,
                                                 start_date=date(2023, 11, 1), today=date(2023, 11, 1))
    assert subscriber.status == 'active'

    rows = subscriptions.list_subscribers(male_gym, today=TODAY)
    assert rows[0]['status'] == 'expired'
    assert subscriptions.list_subscribers(male_gym, status='active', today=TODAY) == []


def test_list_search_by_name_or_phone(male_gym, monthly_type):
    subscriptions.create_subscriber(male_gym, 'Omar', '0911', monthly_type.id, today=TODAY)
    subscriptions.create_subscriber(male_gym, 'Khaled', '0922', monthly_type.id, today=TODAY)
    assert [r['full_name'] for r in subscriptions.list_subscribers(male_gym, search='092', today=TODAY)] == ['Khaled']


def test_delete_type_with_subscribers_is_blocked(male_gym, monthly_type):
    subscriptions.create_subscriber(male_gym, 'Omar', None, monthly_type.id, today=TODAY)
    with pytest.raises(ReferentialIntegrityError):
        subscriptions.delete_subscription_type(male_gym, monthly_type.id)


def test_subscription_type_validation(male_gym):
    with pytest.raises(ValidationError):
        subscriptions.create_subscription_type(male_gym, 'bad', 'session', 100)
    with pytest.raises(ValidationError):
        subscriptions.create_subscription_type(male_gym, 'bad', 'yearly', 100, duration_months=12)
    st = subscriptions.create_subscription_type(male_gym, '10 sessions', 'session', '2000',
                                                session_count=10)
    assert st.session_count == 10
    assert subscriptions.list_subscription_types(male_gym) == [st]


def test_kind_change_is_blocked_while_type_has_subscribers(male_gym, monthly_type, session_type):
    subscriptions.create_subscriber(male_gym, 'Omar', None, monthly_type.id, today=TODAY)
    subscriptions.create_subscriber(male_gym, 'Ali', None, session_type.id, today=TODAY)

    with pytest.raises(ValidationError):
        subscriptions.update_subscription_type(male_gym, monthly_type.id, kind='session',
                                               session_count=10)
    with pytest.raises(ValidationError):
        subscriptions.update_subscription_type(male_gym, session_type.id, kind='monthly',
                                               duration_months=1)

    rows = {r['full_name']: r for r in subscriptions.list_subscribers(male_gym, today=TODAY)}
    assert rows['Omar']['kind'] == 'monthly'
    assert rows['Omar']['remaining_sessions'] is None
    assert rows['Omar']['status'] == 'active'
    assert rows['Ali']['kind'] == 'session'
    assert rows['Ali']['remaining_sessions'] == 12


def test_other_fields_can_change_while_type_has_subscribers(male_gym, monthly_type):
    subscriptions.create_subscriber(male_gym, 'Omar', None, monthly_type.id, today=TODAY)
    st = subscriptions.update_subscription_type(male_gym, monthly_type.id, kind='monthly',
                                                price='3500', duration_months=2)
    assert st.price == Decimal('3500.00')
    assert st.duration_months == 2


def test_kind_change_allowed_without_subscribers(male_gym, monthly_type):
    st = subscriptions.update_subscription_type(male_gym, monthly_type.id, kind='session',
                                                session_count=8)
    assert st.is_session_based()
    assert st.session_count == 8
