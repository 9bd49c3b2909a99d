# hookguard/adapters/outbound/persistence/models/token_usage_model.py

from sqlalchemy import Column, BigInteger, Integer, String, Boolean, DateTime, ForeignKey, Uuid

from hookguard.adapters.outbound.persistence.models.base_model import Base


class TokenUsageLog(Base):
    """
    Append-only record of one authenticated request.

    Attributes:
        log_id: Autoincrement identifier
        token_id: Token that authenticated the request
        ip_address: Caller address, if known
        endpoint_path: Request path
        is_successful: Whether the downstream handler succeeded
        error_message: Failure description
        used_at: When the request completed (UTC)
    """
    __tablename__ = "token_usage_logs"

    # BIGINT on PostgreSQL, INTEGER on SQLite so autoincrement works there
    log_id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)
    token_id = Column(
        Uuid,
        ForeignKey("webhook_tokens.token_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    ip_address = Column(String(45), nullable=True)
    endpoint_path = Column(String(256), nullable=False)
    is_successful = Column(Boolean, nullable=False)
    error_message = Column(String(1024), nullable=True)
    used_at = Column(DateTime, nullable=False)
