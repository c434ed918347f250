import logging

from fastapi import FastAPI, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware

from .config import get_settings
from .models import AccountSnapshot, TransactionRequest
from .reader import InvalidTransactionError, parse_transaction
from .service import LedgerService


settings = get_settings()
logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Payments Engine API",
    description="Applies deposits, withdrawals and dispute transactions to client accounts",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

ledger_service = LedgerService(config=settings.engine_config())


@app.get("/health", tags=["System"])
def health_check():
    return {"status": "healthy", "service": "payments-engine"}


@app.post("/transactions", status_code=status.HTTP_202_ACCEPTED, tags=["Transactions"])
def submit_transaction(request: TransactionRequest) -> dict:
    try:
        transaction = parse_transaction(request.type, request.client, request.tx, request.amount)
    except InvalidTransactionError as e:
        logger.info("Rejected transaction: %s", e)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    ledger_service.apply(transaction)
    return {"status": "accepted"}


@app.get("/accounts", response_model=list[AccountSnapshot], tags=["Accounts"])
def list_accounts() -> list[AccountSnapshot]:
    return ledger_service.snapshot()


@app.get("/accounts/{client}", response_model=AccountSnapshot, tags=["Accounts"])
def get_account(client: int) -> AccountSnapshot:
    account = ledger_service.get_account(client)
    if account is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Account {client} not found")
    return account.to_snapshot()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
