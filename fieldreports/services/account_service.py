import logging
import re
import secrets
from collections import namedtuple
from datetime import timedelta

from sqlalchemy.exc import SQLAlchemyError
from werkzeug.security import generate_password_hash, check_password_hash

from fieldreports.extensions import db
from fieldreports.models import Account, UserSession, LoginHistory
from fieldreports.utils import utcnow

logger = logging.getLogger(__name__)

USERNAME_PATTERN = re.compile(r'[A-Za-z0-9_\u4e00-\u9fa5-]+')
USERNAME_MIN, USERNAME_MAX = 2, 50
PASSWORD_MIN, PASSWORD_MAX = 6, 72

SessionIdentity = namedtuple('SessionIdentity', ['username', 'user_id'])


class AccountStoreError(Exception):
    """The account store could not be reached or queried."""


class RegistrationError(ValueError):
    pass


def validate_username(username):
    """Return an error message for an unacceptable username, or None."""
    if not isinstance(username, str) or not username.strip():
        return 'Username is required'
    trimmed = username.strip()
    if len(trimmed) < USERNAME_MIN:
        return f'Username must be at least {USERNAME_MIN} characters'
    if len(trimmed) > USERNAME_MAX:
        return f'Username must be at most {USERNAME_MAX} characters'
    if not USERNAME_PATTERN.fullmatch(trimmed):
        return 'Username may only contain letters, digits, Chinese characters, underscores and hyphens'
    return None


def validate_password(password):
    if not isinstance(password, str) or not password:
        return 'Password is required'
    if len(password) < PASSWORD_MIN:
        return f'Password must be at least {PASSWORD_MIN} characters'
    if len(password) > PASSWORD_MAX:
        return f'Password must be at most {PASSWORD_MAX} characters'
    return None


def find_account(username):
    return db.session.execute(db.select(Account).filter_by(username=username)).scalar_one_or_none()


def register_account(username, password):
    """Create an account, raising RegistrationError when input is rejected."""
    error = validate_username(username) or validate_password(password)
    if error:
        raise RegistrationError(error)

    username = username.strip()
    if find_account(username):
        raise RegistrationError('Username already exists')

    account = Account(
        username=username,
        password_hash=generate_password_hash(password),
        created_at=utcnow(),
    )
    db.session.add(account)
    db.session.commit()
    logger.info('Registered account %s', username)
    return account


def verify_login(username, password, ip_address='unknown'):
    """Check credentials and record the attempt. Returns the Account or None."""
    username = (username or '').strip()
    account = find_account(username)

    if not account:
        status = 'failed_user_not_found'
    elif not check_password_hash(account.password_hash, password or ''):
        status = 'failed_wrong_password'
    else:
        status = 'success'

    db.session.add(LoginHistory(username=username, login_at=utcnow(), ip_address=ip_address, status=status))
    db.session.commit()

    if status != 'success':
        logger.info('Login rejected for %s (%s)', username, status)
        return None
    return account


def create_session(account, lifetime_hours=8):
    now = utcnow()
    session = UserSession(
        token=secrets.token_hex(32),
        account_id=account.id,
        created_at=now,
        expires_at=now + timedelta(hours=lifetime_hours),
    )
    db.session.add(session)
    db.session.commit()
    return session


def revoke_session(token):
    session = db.session.execute(db.select(UserSession).filter_by(token=token)).scalar_one_or_none()
    if session is None or session.revoked_at is not None:
        return False
    session.revoked_at = utcnow()
    db.session.commit()
    return True


class SqlAccountStore:
    """Session lookups against the account database."""

    def lookup_session(self, token):
        try:
            row = db.session.execute(
                db.select(UserSession, Account)
                .join(Account, UserSession.account_id == Account.id)
                .where(UserSession.token == token)
            ).first()
        except SQLAlchemyError as e:
            db.session.rollback()
            raise AccountStoreError(str(e)) from e

        if row is None:
            return None
        session, account = row
        if session.revoked_at is not None or session.expires_at <= utcnow():
            return None
        return SessionIdentity(username=account.username, user_id=account.id)
