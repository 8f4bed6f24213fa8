"""
================================================================================
FANZONE COMMUNITY - ACCOUNT & TEAM MODELS
================================================================================

@file        models.py
@description Django ORM models for users, teams and team membership
@version     1.0.0

MODULE PURPOSE
================================================================================
These models back the read contracts the chat core consumes:
- User (AbstractUser extension with a public display name)
- Team (sports team a fan can support)
- UserTeam (a user's membership record for a team, with a priority order)

User and team management screens live elsewhere in the system. The chat
core only reads these tables (see accounts/directory.py).

MODEL RELATIONSHIPS
================================================================================
User (N) <─────> (N) Team (via UserTeam)
Team (1) ──────> (N) chat.ChatRoom (team-scoped rooms)

================================================================================
"""

from django.contrib.auth.models import AbstractUser
from django.db import models


# ============================================================================
# SECTION 1: USER MODEL
# ============================================================================

class User(AbstractUser):
    """
    Extended User model with community profile fields.

    Attributes:
        nickname (CharField): Public display name shown in chat
        profile_image (ImageField): User avatar image
        bio (TextField): Profile biography (max 500 chars)

    Properties:
        display_name: nickname, falling back to the username

    Related Names:
        user_teams: QuerySet of UserTeam membership records
        chat_rooms: QuerySet of ChatRoom objects the user has joined
        chat_messages: QuerySet of ChatMessage objects the user wrote
    """

    nickname = models.CharField(
        max_length=30,
        blank=True,
        help_text="Public display name shown in chat"
    )
    profile_image = models.ImageField(
        upload_to='profile_images/',
        null=True,
        blank=True,
        help_text="User's profile avatar image"
    )
    bio = models.TextField(
        max_length=500,
        blank=True,
        help_text="Profile biography or description"
    )

    @property
    def display_name(self):
        return self.nickname or self.username

    @property
    def avatar_url(self):
        if self.profile_image:
            return self.profile_image.url
        return None


# ============================================================================
# SECTION 2: TEAM MODELS
# ============================================================================

class Team(models.Model):
    """
    Sports team that fans can follow.

    Team-scoped chat rooms reference a Team; only users holding a
    UserTeam record for that team may view them.

    Example:
        team = Team.objects.create(name="Seoul Tigers", short_name="TIG")
    """

    name = models.CharField(
        max_length=100,
        unique=True,
        help_text="Team name"
    )
    short_name = models.CharField(
        max_length=10,
        blank=True,
        help_text="Abbreviated team name"
    )
    logo_url = models.URLField(
        max_length=500,
        blank=True,
        help_text="Team logo image URL"
    )
    is_active = models.BooleanField(
        default=True,
        help_text="Inactive teams are hidden from team pickers"
    )
    created_at = models.DateTimeField(
        auto_now_add=True,
        help_text="Creation timestamp"
    )

    class Meta:
        ordering = ['name']

    def __str__(self):
        return self.name


class UserTeam(models.Model):
    """
    Membership of a user in a team.

    This is the visibility source for team-scoped chat rooms. It is
    independent of the chat room participant list.

    Attributes:
        user (ForeignKey): Member
        team (ForeignKey): Team
        priority (PositiveIntegerField): Ordering among the user's teams
            (lower first, 0 = favourite team)

    Meta:
        unique_together: One membership per user per team
    """

    user = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='user_teams',
        help_text="Team member"
    )
    team = models.ForeignKey(
        Team,
        on_delete=models.CASCADE,
        related_name='memberships',
        help_text="Team the user belongs to"
    )
    priority = models.PositiveIntegerField(
        default=0,
        help_text="Display order among the user's teams (lower first)"
    )
    created_at = models.DateTimeField(
        auto_now_add=True,
        help_text="When the user joined the team"
    )

    class Meta:
        unique_together = ('user', 'team')
        ordering = ['priority', 'created_at']

    def __str__(self):
        return f"{self.user} in {self.team}"
