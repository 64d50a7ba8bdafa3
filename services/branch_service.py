# cashwrap/services/branch_service.py

import logging
from typing import List, Optional

from domain.errors import NotFoundError, PreconditionError, ValidationError
from domain.models import User, UserRole
from services import inventory_service, order_service, supplier_service, warehouse_service
from services.store import ReceiptStore

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("branch_name", "company", "username", "tin_number")


def login(store: ReceiptStore, username: str) -> User:
    username = (username or "").strip()
    for user in store.users:
        if user.username == username:
            logger.info("Login %s (%s)", user.username, user.role.value)
            return user
    logger.warning("Login rejected for %r", username)
    raise NotFoundError("Unauthorized: credential not found. Please contact your system administrator.")


def get_user(store: ReceiptStore, user_id: str) -> User:
    for user in store.users:
        if user.id == user_id:
            return user
    raise NotFoundError(f"Account {user_id} not found")


def _check_username(store: ReceiptStore, username: str, exclude_id: Optional[str] = None) -> str:
    username = (username or "").strip()
    if not username:
        raise ValidationError("Username is required")
    if any(u.username == username and u.id != exclude_id for u in store.users):
        raise ValidationError(f"Username '{username}' is already taken")
    return username


def _required(value: Optional[str], label: str) -> str:
    value = (value or "").strip()
    if not value:
        raise ValidationError(f"{label} is required")
    return value


def add_branch(
        store: ReceiptStore,
        branch_name: str,
        company: str,
        username: str,
        tin_number: Optional[str] = None,
) -> User:
    branch_name = _required(branch_name, "Branch name")
    company = _required(company, "Company")
    username = _check_username(store, username)

    user = User(
        id=store.next_id("br_"),
        username=username,
        role=UserRole.BRANCH,
        branch_name=branch_name,
        company=company,
        tin_number=(tin_number or "").strip() or None,
    )
    store.users.append(user)
    logger.info("Branch %s created (%s / %s)", user.id, user.branch_name, user.company)
    return user


def update_branch(store: ReceiptStore, user_id: str, **changes) -> User:
    """
    Apply admin edits to a branch account. A company change is copied
    onto the branch's inventory rows.
    """
    user = get_user(store, user_id)

    unknown = set(changes) - set(EDITABLE_FIELDS)
    if unknown:
        raise ValidationError(f"Cannot edit: {', '.join(sorted(unknown))}")

    if "username" in changes:
        changes["username"] = _check_username(store, changes["username"], exclude_id=user.id)
    if "branch_name" in changes:
        changes["branch_name"] = _required(changes["branch_name"], "Branch name")
    if "company" in changes:
        changes["company"] = _required(changes["company"], "Company")
    if "tin_number" in changes:
        changes["tin_number"] = (changes["tin_number"] or "").strip() or None

    with store.transaction():
        for key, value in changes.items():
            setattr(user, key, value)
        if "company" in changes:
            inventory_service.sync_company(store, user.id, changes["company"])

    logger.info("Branch %s updated: %s", user.id, ", ".join(sorted(changes)))
    return user


def delete_branch(store: ReceiptStore, user_id: str) -> User:
    """
    Remove a branch and everything it owns: inventory, warehouse
    allocation, receipt orders and supplier orders.
    """
    user = get_user(store, user_id)
    if user.role == UserRole.ADMIN:
        raise PreconditionError("The admin account cannot be deleted")

    with store.transaction():
        store.users = [u for u in store.users if u.id != user_id]
        n_inv = inventory_service.remove_branch(store, user_id)
        n_wh = warehouse_service.remove_branch(store, user_id)
        n_ord = order_service.remove_branch(store, user_id)
        n_sup = supplier_service.remove_branch(store, user_id)

    logger.info(
        "Branch %s deleted (inventory=%d warehouse=%d orders=%d supplier=%d)",
        user_id, n_inv, n_wh, n_ord, n_sup,
    )
    return user


def list_branches(store: ReceiptStore, query: str = "") -> List[User]:
    q = (query or "").strip().lower()
    result = []
    for u in store.users:
        if u.role == UserRole.ADMIN:
            continue
        if q and not (
            q in (u.branch_name or "").lower()
            or q in (u.company or "").lower()
            or q in u.username.lower()
        ):
            continue
        result.append(u)
    return result
