from django.conf import settings
from django.db import models
from django.utils import timezone
from user.models import BaseModel


class Club(BaseModel):
    name = models.CharField(max_length=255, verbose_name='Name')
    is_active = models.BooleanField(default=True, verbose_name='Is Active')  # type: ignore

    class Meta:  # type: ignore
        db_table = 'clubs'
        verbose_name = 'Club'
        verbose_name_plural = 'Clubs'
        ordering = ['name']

    def __str__(self):
        return self.name


class Team(BaseModel):
    club = models.ForeignKey(  # type: ignore
        Club,
        on_delete=models.CASCADE,
        related_name='teams',
        verbose_name='Club'
    )
    name = models.CharField(max_length=255, verbose_name='Name')
    age_group = models.CharField(max_length=50, blank=True, default='', verbose_name='Age Group')
    season = models.CharField(max_length=50, null=True, blank=True, verbose_name='Season')
    is_active = models.BooleanField(default=True, verbose_name='Is Active')  # type: ignore

    class Meta:  # type: ignore
        db_table = 'teams'
        verbose_name = 'Team'
        verbose_name_plural = 'Teams'
        ordering = ['name']

    def __str__(self):
        if self.age_group:
            return f"{self.name} ({self.age_group})"
        return self.name

    def current_roster(self):
        """Players with an active membership in this team, read live."""
        return Player._default_manager.filter(
            team_memberships__team=self,
            team_memberships__is_active=True,
        ).distinct()


class Player(BaseModel):
    club = models.ForeignKey(  # type: ignore
        Club,
        on_delete=models.CASCADE,
        related_name='players',
        verbose_name='Club'
    )
    first_name = models.CharField(max_length=150, verbose_name='First Name')
    last_name = models.CharField(max_length=150, verbose_name='Last Name')
    jersey_number = models.PositiveIntegerField(null=True, blank=True, verbose_name='Jersey Number')
    is_active = models.BooleanField(default=True, verbose_name='Is Active')  # type: ignore

    class Meta:  # type: ignore
        db_table = 'players'
        verbose_name = 'Player'
        verbose_name_plural = 'Players'
        ordering = ['last_name', 'first_name']

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def __str__(self):
        if self.jersey_number is not None:
            return f"#{self.jersey_number} {self.full_name}"
        return self.full_name


class TeamPlayer(BaseModel):
    team = models.ForeignKey(  # type: ignore
        Team,
        on_delete=models.CASCADE,
        related_name='memberships',
        verbose_name='Team'
    )
    player = models.ForeignKey(  # type: ignore
        Player,
        on_delete=models.CASCADE,
        related_name='team_memberships',
        verbose_name='Player'
    )
    is_active = models.BooleanField(default=True, verbose_name='Is Active')  # type: ignore
    joined_at = models.DateField(default=timezone.localdate, verbose_name='Joined At')
    left_at = models.DateField(null=True, blank=True, verbose_name='Left At')

    class Meta:  # type: ignore
        db_table = 'team_players'
        verbose_name = 'Team Player'
        verbose_name_plural = 'Team Players'
        ordering = ['team', 'player']
        unique_together = [['team', 'player']]

    def __str__(self):
        return f"{self.player} - {self.team}"


class Coach(BaseModel):
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='coach_profile',
        verbose_name='User'
    )
    club = models.ForeignKey(  # type: ignore
        Club,
        on_delete=models.CASCADE,
        related_name='coaches',
        verbose_name='Club'
    )
    full_name = models.CharField(max_length=255, verbose_name='Full Name')

    class Meta:  # type: ignore
        db_table = 'coaches'
        verbose_name = 'Coach'
        verbose_name_plural = 'Coaches'
        ordering = ['full_name']

    def __str__(self):
        return self.full_name


class TeamCoachRole(models.TextChoices):
    HEAD = ('head', 'Head Coach')
    ASSISTANT = ('assistant', 'Assistant Coach')


class TeamCoach(BaseModel):
    team = models.ForeignKey(  # type: ignore
        Team,
        on_delete=models.CASCADE,
        related_name='coach_assignments',
        verbose_name='Team'
    )
    coach = models.ForeignKey(  # type: ignore
        Coach,
        on_delete=models.CASCADE,
        related_name='team_assignments',
        verbose_name='Coach'
    )
    role = models.CharField(
        max_length=20,
        choices=TeamCoachRole.choices,
        default=TeamCoachRole.HEAD,
        verbose_name='Role'
    )
    is_active = models.BooleanField(default=True, verbose_name='Is Active')  # type: ignore

    class Meta:  # type: ignore
        db_table = 'team_coaches'
        verbose_name = 'Team Coach'
        verbose_name_plural = 'Team Coaches'
        unique_together = [['team', 'coach']]

    def __str__(self):
        return f"{self.coach} - {self.team}"
