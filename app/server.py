"""REST backend persisting expense records at /api/expenses."""
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional

sys.path.append(str(Path(__file__).resolve().parent.parent))

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
from sqlalchemy import Column, DateTime, Float, Integer, String, create_engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from tracker.config import configure_logging, load_settings

logger = logging.getLogger(__name__)

Base = declarative_base()


class Expense(Base):
    __tablename__ = "expenses"

    id = Column(Integer, primary_key=True, index=True)
    amount = Column(Float, nullable=False)
    category = Column(String, default="")
    description = Column(String, default="")
    date = Column(DateTime, default=datetime.now)


class ExpenseIn(BaseModel):
    amount: float = Field(..., gt=0)
    category: str = ""
    description: str = ""
    date: Optional[datetime] = None


class ExpenseOut(BaseModel):
    id: str
    amount: float
    category: str
    description: str
    date: datetime


def _to_out(row: Expense) -> ExpenseOut:
    return ExpenseOut(
        id=str(row.id),
        amount=row.amount,
        category=row.category or "",
        description=row.description or "",
        date=row.date,
    )


def create_app(database_url: str) -> FastAPI:
    engine = create_engine(
        database_url,
        connect_args={"check_same_thread": False} if database_url.startswith("sqlite") else {},
    )
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)

    def get_db():
        db = SessionLocal()
        try:
            yield db
        finally:
            db.close()

    app = FastAPI(title="Spends Tracker API", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.post("/api/expenses", response_model=ExpenseOut, status_code=201)
    def create_expense(body: ExpenseIn, db: Session = Depends(get_db)):
        row = Expense(
            amount=body.amount,
            category=body.category,
            description=body.description,
            date=body.date or datetime.now(),
        )
        db.add(row)
        db.commit()
        db.refresh(row)
        logger.info("expense %s stored", row.id)
        return _to_out(row)

    @app.get("/api/expenses", response_model=List[ExpenseOut])
    def list_expenses(db: Session = Depends(get_db)):
        return [_to_out(row) for row in db.query(Expense).order_by(Expense.date, Expense.id).all()]

    return app


if __name__ == "__main__":
    import uvicorn

    settings = load_settings()
    configure_logging(settings.log_level)
    logger.info("Server running on port %d", settings.port)
    uvicorn.run(create_app(settings.database_url), host="0.0.0.0", port=settings.port)
