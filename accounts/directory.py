"""
Read contracts over users and team memberships.

The chat core never writes to these tables; it only looks users up, searches
them by display name, and checks team membership for room visibility.
"""

from django.db.models import Q

from .models import User, UserTeam


def get_user(user_id):
    """Return the User with this id, or None if there is no such user."""
    return User.objects.filter(id=user_id).first()


def search_users(query, exclude_user_id=None):
    """
    Users whose display name contains ``query`` (case-insensitive): the
    nickname, or the username for users without a nickname.

    The caller is excluded so they cannot start a chat with themselves.
    Inactive accounts are never returned.
    """
    users = User.objects.filter(is_active=True)
    if exclude_user_id is not None:
        users = users.exclude(id=exclude_user_id)
    query = (query or '').strip()
    if query:
        users = users.filter(
            Q(nickname__icontains=query)
            | Q(nickname="", username__icontains=query)
        )
    return users.order_by('nickname', 'username', 'id')


def list_user_teams(user_id):
    """Team memberships of a user, favourite team first."""
    return (
        UserTeam.objects.filter(user_id=user_id)
        .select_related('team')
        .order_by('priority', 'created_at')
    )


def user_team_ids(user_id):
    return list(
        UserTeam.objects.filter(user_id=user_id).values_list('team_id', flat=True)
    )


def is_team_member(user_id, team_id):
    return UserTeam.objects.filter(user_id=user_id, team_id=team_id).exists()
