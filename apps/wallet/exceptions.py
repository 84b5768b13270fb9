from core.exceptions import MatkaException, NotFoundException, StateConflictException


class WalletException(MatkaException):
    """Base wallet exception"""
    pass


class WalletNotFoundException(NotFoundException):
    default_detail = 'Wallet not found'
    default_code = 'wallet_not_found'


class InvalidAmountException(WalletException):
    default_detail = 'Invalid amount'
    default_code = 'invalid_amount'


class WithdrawalNotFoundException(NotFoundException):
    default_detail = 'Withdrawal request not found'
    default_code = 'withdrawal_not_found'


class WithdrawalAlreadyProcessedException(StateConflictException):
    default_detail = 'Withdrawal request already processed'
    default_code = 'withdrawal_already_processed'
