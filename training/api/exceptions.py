from rest_framework.exceptions import APIException
from rest_framework import status


class TeamNotFoundError(APIException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Team not found.'
    default_code = 'team_not_found'


class SessionNotFoundError(APIException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Training session not found.'
    default_code = 'session_not_found'


class RecurrencePatternNotFoundError(APIException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Recurrence pattern not found.'
    default_code = 'recurrence_not_found'


class PlayerNotFoundError(APIException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Player not found.'
    default_code = 'player_not_found'


class SessionCancelledError(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'This training session has been cancelled.'
    default_code = 'session_cancelled'


class SessionAlreadyCancelledError(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'This training session is already cancelled.'
    default_code = 'session_already_cancelled'


class TeamChangeNotAllowedError(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'A session generated from a recurring schedule cannot be moved to another team.'
    default_code = 'team_change_not_allowed'


class InactivePatternError(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'This recurring schedule is no longer active.'
    default_code = 'recurrence_inactive'


class PlayerNotOnRosterError(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'One or more players are not on the team roster.'
    default_code = 'player_not_on_roster'

    def __init__(self, player_ids):
        super().__init__(detail={
            'message': str(self.default_detail),
            'player_ids': [str(player_id) for player_id in player_ids],
        })


class ExpansionFailedError(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Some sessions could not be created; nothing was saved.'
    default_code = 'expansion_failed'

    def __init__(self, succeeded_dates, failed_dates):
        self.succeeded_dates = list(succeeded_dates)
        self.failed_dates = list(failed_dates)
        super().__init__(detail={
            'message': str(self.default_detail),
            'succeeded_dates': [day.isoformat() for day in self.succeeded_dates],
            'failed_dates': [day.isoformat() for day in self.failed_dates],
        })
