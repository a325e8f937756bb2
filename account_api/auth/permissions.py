from account_api.models.user import ROLE_ADMIN, ROLE_USER

ROLE_RANK = {
    ROLE_USER: 1,
    ROLE_ADMIN: 2,
}


def authorize(required_role: str, actual_role: str | None) -> bool:
    """Return True when ``actual_role`` satisfies ``required_role``.

    Roles are ranked, so an admin passes a ``user`` check. Unknown roles on
    either side are denied.
    """
    if actual_role is None:
        return False
    required_rank = ROLE_RANK.get(required_role)
    actual_rank = ROLE_RANK.get(actual_role)
    if required_rank is None or actual_rank is None:
        return False
    return actual_rank >= required_rank


def can_act_on_user(actor_id: int, actor_role: str, target_id: int) -> bool:
    return actor_id == target_id or authorize(ROLE_ADMIN, actor_role)
