from app.core.errors import AuthorizationError, NotFoundError
from app.models import User, UserRole
from app.repositories import UserRepository

ELEVATED_ROLES = frozenset({UserRole.ADMIN})


def is_elevated(user: User) -> bool:
    return user.role in ELEVATED_ROLES


def resolve_employee_scope(current_user: User, requested_employee_id: str | None) -> str:
    """Pick the employee a stock query runs against.

    Callers always see their own data; only elevated roles may name another
    employee explicitly.
    """
    requested = (requested_employee_id or "").strip()
    if not requested or requested == current_user.employee_id:
        return current_user.employee_id
    if not is_elevated(current_user):
        raise AuthorizationError("Insufficient permissions to view another employee's stock data")
    return requested


async def require_employee(users: UserRepository, employee_id: str) -> User:
    user = await users.find_by_employee_id(employee_id)
    if user is None:
        raise NotFoundError(f"Employee {employee_id} not found")
    return user
