"""
بوابة قاعدة البيانات.

query و run هما الواجهة التي تستخدمها التقارير والاستعلامات المباشرة،
و write_scope هو نطاق الكتابة الذري: كل التغييرات داخله تُحفظ معاً
أو تُلغى معاً عند أي خطأ.
"""

from collections import namedtuple
from contextlib import contextmanager

from flask import current_app
from flask_babel import gettext as _
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from models import db
from services.errors import (
    DataAccessError,
    GymLedgerError,
    ReferentialIntegrityError,
    ValidationError,
)

RunResult = namedtuple('RunResult', ['inserted_id', 'affected_count'])


def enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite لا يفرض المفاتيح الأجنبية إلا بعد تفعيلها لكل اتصال
    cursor = dbapi_connection.cursor()
    cursor.execute('PRAGMA foreign_keys = ON')
    cursor.close()


def translate_error(error):
    """تحويل أخطاء SQLAlchemy إلى أخطاء النظام"""
    if isinstance(error, IntegrityError):
        detail = str(error.orig).upper()
        if 'FOREIGN KEY' in detail:
            return ReferentialIntegrityError(_('لا يمكن الحذف لوجود سجلات مرتبطة'))
        if 'UNIQUE' in detail:
            return ValidationError(_('القيمة مستخدمة بالفعل'))
        return ValidationError(_('البيانات المدخلة غير صالحة'))
    return DataAccessError()


@contextmanager
def write_scope():
    session = db.session
    try:
        yield session
        session.commit()
    except GymLedgerError:
        session.rollback()
        raise
    except SQLAlchemyError as e:
        session.rollback()
        current_app.logger.warning('Write rolled back: %s', e)
        raise translate_error(e) from e
    except Exception:
        session.rollback()
        raise


def query(sql, params=None):
    """تنفيذ استعلام قراءة وإرجاع الصفوف كقواميس"""
    try:
        result = db.session.execute(text(sql), params or {})
        return [dict(row) for row in result.mappings().all()]
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error('Query failed: %s', e)
        raise translate_error(e) from e


def run(sql, params=None, commit=True):
    """
    تنفيذ أمر كتابة.
    commit=False عند الاستدعاء داخل write_scope حتى يُحفظ مع باقي التغييرات.
    """
    try:
        result = db.session.execute(text(sql), params or {})
        outcome = RunResult(result.lastrowid, result.rowcount)
        if commit:
            db.session.commit()
        return outcome
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error('Statement failed: %s', e)
        raise translate_error(e) from e
