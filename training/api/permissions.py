from django.db.models import Q

from club.models import Team, Player, TeamCoach
from user.api.permissions import IsCoachOrAbove


def can_manage_team(user, team) -> bool:
    """
    Super admin, club admin of the team's club, or an actively assigned coach
    whose coach grant belongs to the team's club.
    """
    if user.is_super_admin():
        return True
    if team.club_id in user.admin_club_ids():
        return True
    if team.club_id not in user.coach_club_ids():
        return False
    return TeamCoach._default_manager.filter(team=team, coach__user=user, is_active=True).exists()


def visible_teams(user):
    teams = Team._default_manager.select_related('club')
    if user.is_super_admin():
        return teams.all()
    return teams.filter(
        Q(club_id__in=user.admin_club_ids())
        | Q(
            club_id__in=user.coach_club_ids(),
            coach_assignments__coach__user=user,
            coach_assignments__is_active=True,
        )
    ).distinct()


class CanManageTraining(IsCoachOrAbove):
    """
    Coach or above for every training endpoint. Object checks accept a team,
    anything with a ``team`` (sessions, patterns) or a player on one of the
    actor's teams.
    """
    message = 'You do not have permission to manage training for this team.'

    def has_object_permission(self, request, view, obj):  # type: ignore
        user = request.user
        if isinstance(obj, Player):
            return visible_teams(user).filter(memberships__player=obj).exists()
        team = obj if isinstance(obj, Team) else obj.team
        return can_manage_team(user, team)
