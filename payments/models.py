from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


DECIMAL_PRECISION = 4
AMOUNT_SCALE = 10 ** DECIMAL_PRECISION
AMOUNT_MAX = 2 ** 64 - 1
USER_ID_MAX = 2 ** 16 - 1
TX_ID_MAX = 2 ** 32 - 1
BALANCE_MIN = -(2 ** 127)
BALANCE_MAX = 2 ** 127 - 1
AMOUNT_MAX_WHOLE_DIGITS = len(str(AMOUNT_MAX // AMOUNT_SCALE))


class LedgerServiceError(Exception):
    pass


class InvalidAmountError(LedgerServiceError, ValueError):
    pass


class AmountOverflowError(InvalidAmountError):
    pass


def parse_amount(text: str) -> int:
    """Parse a decimal string such as "123.45" into an integer scaled by 10,000."""
    whole, dot, fraction = text.partition(".")
    if not dot:
        raise InvalidAmountError(f"Expected a decimal point in amount {text!r}")
    if not (whole.isascii() and whole.isdigit()) or not (fraction.isascii() and fraction.isdigit()):
        raise InvalidAmountError(f"Amount {text!r} is not a non-negative decimal")
    if len(fraction) > DECIMAL_PRECISION:
        raise InvalidAmountError(
            f"At most {DECIMAL_PRECISION} decimal digits allowed, got {text!r}"
        )

    whole = whole.lstrip("0") or "0"
    if len(whole) > AMOUNT_MAX_WHOLE_DIGITS:
        raise AmountOverflowError(f"Amount {text[:32]!r} overflows")

    value = int(whole) * AMOUNT_SCALE + int(fraction.ljust(DECIMAL_PRECISION, "0"))
    if value > AMOUNT_MAX:
        raise AmountOverflowError(f"Amount {text!r} overflows")
    return value


def format_amount(value: int) -> str:
    sign = "-" if value < 0 else ""
    whole, fraction = divmod(abs(value), AMOUNT_SCALE)
    return f"{sign}{whole}.{fraction:0{DECIMAL_PRECISION}d}"


class TransactionKind(str, Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"


class DisputeState(str, Enum):
    INITIAL = "initial"
    DISPUTED = "disputed"
    RESOLVED = "resolved"
    CHARGED_BACK = "charged_back"


UserId = Annotated[int, Field(ge=0, le=USER_ID_MAX)]
TransactionId = Annotated[int, Field(ge=0, le=TX_ID_MAX)]
Amount = Annotated[int, Field(ge=0, le=AMOUNT_MAX)]


class _TransactionBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    user: UserId
    tx: TransactionId

    @property
    def kind(self) -> TransactionKind:
        return TransactionKind(self.type)


class Deposit(_TransactionBase):
    type: Literal["deposit"] = "deposit"
    amount: Amount


class Withdrawal(_TransactionBase):
    type: Literal["withdrawal"] = "withdrawal"
    amount: Amount


class Dispute(_TransactionBase):
    type: Literal["dispute"] = "dispute"


class Resolve(_TransactionBase):
    type: Literal["resolve"] = "resolve"


class Chargeback(_TransactionBase):
    type: Literal["chargeback"] = "chargeback"


Transaction = Annotated[
    Union[Deposit, Withdrawal, Dispute, Resolve, Chargeback],
    Field(discriminator="type"),
]

TransactionAdapter = TypeAdapter(Transaction)


class Account(BaseModel):
    user: UserId
    available: int = 0
    held: int = 0
    total: int = 0
    locked: bool = False

    def to_snapshot(self) -> "AccountSnapshot":
        return AccountSnapshot(
            client=self.user,
            available=format_amount(self.available),
            held=format_amount(self.held),
            total=format_amount(self.total),
            locked=self.locked,
        )


class TransactionRecord(BaseModel):
    transaction: Deposit
    state: DisputeState = DisputeState.INITIAL


class AccountSnapshot(BaseModel):
    client: int
    available: str
    held: str
    total: str
    locked: bool

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "client": 1,
            "available": "1.5000",
            "held": "0.0000",
            "total": "1.5000",
            "locked": False,
        }
    })


class TransactionRequest(BaseModel):
    type: str = Field(..., description="deposit, withdrawal, dispute, resolve or chargeback")
    client: int
    tx: int
    amount: Optional[str] = Field(default=None, description="Decimal with up to 4 fractional digits")

    model_config = ConfigDict(json_schema_extra={
        "example": {"type": "deposit", "client": 1, "tx": 1, "amount": "1.5"}
    })
