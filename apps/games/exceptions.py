from core.exceptions import MatkaException, NotFoundException, StateConflictException


class GameNotFoundException(NotFoundException):
    default_detail = 'Game not found or inactive'
    default_code = 'game_not_found'


class GameClosedException(MatkaException):
    default_detail = 'Game Closed'
    default_code = 'game_closed'


class SessionNotFoundException(NotFoundException):
    default_detail = 'Game session not found'
    default_code = 'session_not_found'


class SessionNotPendingException(StateConflictException):
    default_detail = 'Game session is not open for this operation'
    default_code = 'session_not_pending'


class AlreadyDeclaredException(SessionNotPendingException):
    default_detail = 'Result already declared for this session'
    default_code = 'already_declared'


class NotYetDeclaredException(StateConflictException):
    default_detail = 'Result not declared yet. Use declare instead.'
    default_code = 'not_yet_declared'


class NoChangeException(MatkaException):
    default_detail = 'New winning number is same as old one'
    default_code = 'no_change'


class InvalidWinningNumberException(MatkaException):
    default_detail = 'Winning number must be a 2-digit number (00-99)'
    default_code = 'invalid_winning_number'
