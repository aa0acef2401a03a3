from datetime import datetime
from fastapi import Request
from challanbook.database import get_collection
from challanbook.enums import AuditAction, Collection


class AuditService:
    @staticmethod
    async def log_activity(user_id: str, email: str, action: AuditAction, ip_address: str = None, details: dict = None):
        audit_collection = await get_collection(Collection.AUDIT_LOGS)
        await audit_collection.insert_one({
            "user_id": user_id,
            "email": email,
            "action": action.value,
            "ip_address": ip_address,
            "details": details,
            "timestamp": datetime.utcnow()
        })

    @staticmethod
    def get_client_ip(request: Request) -> str:
        # Behind a proxy the first hop in X-Forwarded-For is the client
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            return forwarded.split(",")[0].strip()
        return request.client.host if request.client else "unknown"
