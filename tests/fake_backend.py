# tests/fake_backend.py
"""
In-memory stand-in for the portal REST backend, served to the client through
httpx.ASGITransport. Records are stored exactly as the wire carries them:
camelCase keys and `_id` identifiers.
"""
import asyncio
import itertools
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Set

from fastapi import APIRouter, Body, FastAPI, Header, HTTPException, Request
from fastapi.responses import JSONResponse, Response

PASSWORD = "Secret123"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def make_user(id: str, role: str = "resident", **extra) -> Dict[str, Any]:
    user = {
        "_id": id,
        "firstName": id.capitalize(),
        "lastName": "Dela Cruz",
        "email": f"{id}@example.com",
        "role": role,
        "isVerified": True,
        "phoneNumber": "09171234567",
        "address": "123 Rizal St., Purok 4",
    }
    user.update(extra)
    return user


class FakeBackend:
    def __init__(self):
        self._ids = itertools.count(1)
        self.calls: List[tuple] = []
        self.delay = 0.0
        self.locked: Set[str] = set()
        self.broken: Set[str] = set()
        self.users: Dict[str, dict] = {
            "resident": make_user("resident"),
            "neighbor": make_user("neighbor"),
            "staff": make_user("staff", "staff"),
            "admin": make_user("admin", "admin"),
        }
        self.complaints: List[dict] = []
        self.services: List[dict] = []
        self.announcements: List[dict] = []
        self.news: List[dict] = []
        self.events: List[dict] = []
        self.registrations: Dict[str, List[str]] = {}
        self.hotlines: List[dict] = []
        self.faqs: List[dict] = []
        self.officials: List[dict] = []
        self.notifications: List[dict] = []
        self.audit_logs: List[dict] = []
        self.site_settings: Optional[dict] = {
            "_id": "settings",
            "barangayName": "Barangay San Isidro",
            "contactEmail": "hall@sanisidro.gov.ph",
        }

    def next_id(self, prefix: str) -> str:
        return f"{prefix}-{next(self._ids)}"

    def calls_to(self, method: str, path: str) -> int:
        return sum(1 for m, p in self.calls if m == method and p == path)

    # Seed helpers
    def add_complaint(self, user_id: str = "resident", **fields) -> dict:
        complaint = {
            "_id": self.next_id("c"),
            "userId": self.users[user_id],
            "title": "Broken streetlight",
            "description": "The streetlight on Rizal St. has been out for a week.",
            "category": "Lighting",
            "priority": "medium",
            "status": "pending",
            "createdAt": _now(),
            "history": [],
            "comments": [],
            "attachments": [],
        }
        complaint.update(fields)
        self.complaints.append(complaint)
        return complaint

    def add_service(self, user_id: str = "resident", **fields) -> dict:
        service = {
            "_id": self.next_id("s"),
            "userId": self.users[user_id],
            "requestType": "Equipment",
            "itemName": "Monobloc chairs",
            "itemType": "Furniture",
            "purpose": "Birthday celebration",
            "borrowDate": "2030-01-10T00:00:00Z",
            "expectedReturnDate": "2030-01-12T00:00:00Z",
            "status": "pending",
            "createdAt": _now(),
        }
        service.update(fields)
        self.services.append(service)
        return service

    def add_announcement(self, **fields) -> dict:
        announcement = {
            "_id": self.next_id("a"),
            "title": "Clean-up drive",
            "content": "Join the barangay clean-up drive this Saturday morning.",
            "category": "general",
            "priority": "medium",
            "author": "Staff Dela Cruz",
            "isPublished": True,
            "isPinned": False,
            "views": 0,
            "createdAt": _now(),
        }
        announcement.update(fields)
        self.announcements.append(announcement)
        return announcement

    def add_news(self, **fields) -> dict:
        item = {
            "_id": self.next_id("n"),
            "title": "New health center opens",
            "summary": "The barangay health center now opens on weekends.",
            "content": "Residents can now visit the health center on Saturdays and Sundays.",
            "imageUrl": "https://example.com/health.jpg",
            "author": "Admin",
            "createdAt": _now(),
        }
        item.update(fields)
        self.news.append(item)
        return item

    def add_event(self, **fields) -> dict:
        event = {
            "_id": self.next_id("e"),
            "title": "Zumba night",
            "description": "Free zumba session at the covered court.",
            "eventDate": "2030-02-01T18:00:00Z",
            "location": "Covered court",
            "organizerId": "staff",
            "maxAttendees": 50,
            "currentAttendees": 0,
            "category": "Health",
            "status": "upcoming",
        }
        event.update(fields)
        self.events.append(event)
        return event

    def add_notification(self, user_id: str = "resident", **fields) -> dict:
        notification = {
            "_id": self.next_id("m"),
            "userId": user_id,
            "title": "Complaint update",
            "message": "Your complaint is now in progress",
            "type": "info",
            "isRead": False,
            "createdAt": _now(),
        }
        notification.update(fields)
        self.notifications.append(notification)
        return notification

    def add_audit_log(self, **fields) -> dict:
        log = {
            "_id": self.next_id("l"),
            "userId": self.users["admin"],
            "action": "LOGIN",
            "resource": "auth",
            "createdAt": _now(),
            "status": "success",
            "ipAddress": "127.0.0.1",
        }
        log.update(fields)
        self.audit_logs.append(log)
        return log


def token_for(user_id: str) -> str:
    return f"tok-{user_id}"


def create_app(backend: FakeBackend) -> FastAPI:
    app = FastAPI()
    router = APIRouter()

    @app.exception_handler(HTTPException)
    async def _as_message(request: Request, exc: HTTPException):
        return JSONResponse(status_code=exc.status_code, content={"message": exc.detail})

    @app.middleware("http")
    async def _record(request: Request, call_next):
        path = request.url.path[len("/api"):]
        backend.calls.append((request.method, path))
        if path in backend.locked:
            return JSONResponse(status_code=401, content={"message": "Not authorized"})
        if path in backend.broken:
            return JSONResponse(status_code=500, content={"message": "Database down"})
        return await call_next(request)

    def current_user(authorization: Optional[str]) -> dict:
        if not authorization or not authorization.startswith("Bearer tok-"):
            raise HTTPException(status_code=401, detail="Not authorized, token failed")
        user = backend.users.get(authorization[len("Bearer tok-"):])
        if user is None:
            raise HTTPException(status_code=401, detail="Not authorized, token failed")
        return user

    def find(records: List[dict], id: str) -> dict:
        for record in records:
            if record["_id"] == id:
                return record
        raise HTTPException(status_code=404, detail="Not found")

    # Auth
    @router.post("/auth/login")
    async def login(payload: dict = Body(...)):
        for user in backend.users.values():
            if user["email"] == payload.get("email") and payload.get("password") == PASSWORD:
                return {**user, "token": token_for(user["_id"])}
        raise HTTPException(status_code=401, detail="Invalid email or password")

    @router.post("/auth/register", status_code=201)
    async def register(payload: dict = Body(...)):
        if any(u["email"] == payload["email"] for u in backend.users.values()):
            raise HTTPException(status_code=400, detail="User already exists")
        user = {key: value for key, value in payload.items() if key != "password"}
        user["_id"] = backend.next_id("u")
        user["isVerified"] = False
        backend.users[user["_id"]] = user
        return {**user, "token": token_for(user["_id"])}

    @router.put("/auth/profile")
    async def update_profile(payload: dict = Body(...), authorization: Optional[str] = Header(None)):
        user = current_user(authorization)
        user.update(payload)
        return user

    # Extra routes used by the client tests
    @router.get("/session-check")
    async def session_check(authorization: Optional[str] = Header(None)):
        if authorization and authorization.startswith("Bearer stale"):
            raise HTTPException(status_code=401, detail="Token expired")
        return {"authorized": authorization is not None}

    @router.get("/empty")
    async def empty():
        return Response(status_code=204)

    # Stats
    @router.get("/stats")
    async def stats(authorization: Optional[str] = Header(None)):
        current_user(authorization)
        return {
            "totalComplaints": len(backend.complaints),
            "pendingComplaints": sum(1 for c in backend.complaints if c["status"] == "pending"),
            "totalServices": len(backend.services),
        }

    @router.get("/stats/report")
    async def report(authorization: Optional[str] = Header(None)):
        current_user(authorization)
        return Response(content=b"%PDF-1.4 fake report", media_type="application/pdf")

    # Complaints
    @router.get("/complaints")
    async def list_complaints(authorization: Optional[str] = Header(None)):
        current_user(authorization)
        if backend.delay:
            await asyncio.sleep(backend.delay)
        return backend.complaints

    @router.post("/complaints", status_code=201)
    async def create_complaint(payload: dict = Body(...), authorization: Optional[str] = Header(None)):
        current_user(authorization)
        complaint = {**payload, "_id": backend.next_id("c"), "createdAt": _now()}
        backend.complaints.append(complaint)
        return complaint

    @router.put("/complaints/{id}/status")
    async def complaint_status(id: str, payload: dict = Body(...), authorization: Optional[str] = Header(None)):
        current_user(authorization)
        complaint = find(backend.complaints, id)
        complaint["status"] = payload["status"]
        if payload.get("note"):
            complaint["statusNote"] = payload["note"]
        complaint["updatedAt"] = _now()
        return complaint

    @router.post("/complaints/{id}/comments", status_code=201)
    async def add_comment(id: str, payload: dict = Body(...), authorization: Optional[str] = Header(None)):
        current_user(authorization)
        complaint = find(backend.complaints, id)
        comment = {**payload, "_id": backend.next_id("k"), "timestamp": _now()}
        complaint.setdefault("comments", []).append(comment)
        return comment

    # Services
    @router.get("/services")
    async def list_services(authorization: Optional[str] = Header(None)):
        current_user(authorization)
        return backend.services

    @router.post("/services", status_code=201)
    async def create_service(payload: dict = Body(...), authorization: Optional[str] = Header(None)):
        current_user(authorization)
        service = {**payload, "_id": backend.next_id("s"), "createdAt": _now()}
        for key in ("borrowDate", "expectedReturnDate"):
            service[key] = f"{service[key]}T00:00:00Z"
        backend.services.append(service)
        return service

    @router.put("/services/{id}/status")
    async def service_status(id: str, payload: dict = Body(...), authorization: Optional[str] = Header(None)):
        current_user(authorization)
        service = find(backend.services, id)
        service["status"] = payload["status"]
        return service

    # Announcements
    @router.get("/announcements")
    async def list_announcements(authorization: Optional[str] = Header(None)):
        current_user(authorization)
        return backend.announcements

    @router.get("/public/announcements")
    async def public_announcements():
        return backend.announcements

    @router.post("/announcements", status_code=201)
    async def create_announcement(payload: dict = Body(...), authorization: Optional[str] = Header(None)):
        current_user(authorization)
        announcement = {**payload, "_id": backend.next_id("a"), "createdAt": _now()}
        backend.announcements.append(announcement)
        return announcement

    @router.put("/announcements/{id}/pin")
    async def toggle_pin(id: str, authorization: Optional[str] = Header(None)):
        current_user(authorization)
        announcement = find(backend.announcements, id)
        announcement["isPinned"] = not announcement.get("isPinned", False)
        return announcement

    # News
    @router.get("/news")
    async def list_news(authorization: Optional[str] = Header(None)):
        current_user(authorization)
        return backend.news

    @router.get("/public/news")
    async def public_news():
        return backend.news

    @router.post("/news", status_code=201)
    async def create_news(payload: dict = Body(...), authorization: Optional[str] = Header(None)):
        current_user(authorization)
        item = {**payload, "_id": backend.next_id("n"), "createdAt": _now()}
        backend.news.append(item)
        return item

    @router.delete("/news/{id}")
    async def delete_news(id: str, authorization: Optional[str] = Header(None)):
        current_user(authorization)
        backend.news.remove(find(backend.news, id))
        return {"message": "Deleted"}

    # Events
    @router.get("/events")
    async def list_events(authorization: Optional[str] = Header(None)):
        user = current_user(authorization)
        return [
            {**e, "isRegistered": user["_id"] in backend.registrations.get(e["_id"], [])}
            for e in backend.events
        ]

    @router.get("/public/events")
    async def public_events():
        return backend.events

    @router.post("/events", status_code=201)
    async def create_event(payload: dict = Body(...), authorization: Optional[str] = Header(None)):
        current_user(authorization)
        event = {**payload, "_id": backend.next_id("e")}
        backend.events.append(event)
        return event

    @router.delete("/events/{id}")
    async def delete_event(id: str, authorization: Optional[str] = Header(None)):
        current_user(authorization)
        backend.events.remove(find(backend.events, id))
        return {"message": "Deleted"}

    @router.post("/events/{id}/register")
    async def register_event(id: str, authorization: Optional[str] = Header(None)):
        user = current_user(authorization)
        event = find(backend.events, id)
        attendees = backend.registrations.setdefault(id, [])
        if user["_id"] in attendees:
            raise HTTPException(status_code=400, detail="Already registered")
        attendees.append(user["_id"])
        event["currentAttendees"] = event.get("currentAttendees", 0) + 1
        return {"message": "Registered"}

    @router.get("/events/{id}/registered")
    async def registered_users(id: str, authorization: Optional[str] = Header(None)):
        current_user(authorization)
        find(backend.events, id)
        return [backend.users[uid] for uid in backend.registrations.get(id, [])]

    # Directory content
    def content_routes(name: str, records: List[dict], prefix: str):
        @router.get(f"/content/{name}")
        async def list_content(authorization: Optional[str] = Header(None)):
            current_user(authorization)
            return records

        @router.post(f"/content/{name}", status_code=201)
        async def create_content(payload: dict = Body(...), authorization: Optional[str] = Header(None)):
            current_user(authorization)
            record = {**payload, "_id": backend.next_id(prefix)}
            records.append(record)
            return record

        @router.delete(f"/content/{name}/{{id}}")
        async def delete_content(id: str, authorization: Optional[str] = Header(None)):
            current_user(authorization)
            records.remove(find(records, id))
            return {"message": "Deleted"}

    content_routes("hotlines", backend.hotlines, "h")
    content_routes("faqs", backend.faqs, "f")
    content_routes("officials", backend.officials, "o")

    @router.get("/public/officials")
    async def public_officials():
        return backend.officials

    # Site settings
    @router.get("/public/settings")
    async def public_settings():
        if backend.site_settings is None:
            raise HTTPException(status_code=404, detail="Settings not configured")
        return backend.site_settings

    @router.get("/admin/settings")
    async def admin_settings(authorization: Optional[str] = Header(None)):
        current_user(authorization)
        return backend.site_settings

    @router.put("/admin/settings")
    async def update_settings(payload: dict = Body(...), authorization: Optional[str] = Header(None)):
        current_user(authorization)
        backend.site_settings = payload
        return payload

    # Users
    @router.get("/admin/users")
    async def list_users(authorization: Optional[str] = Header(None)):
        current_user(authorization)
        return list(backend.users.values())

    @router.put("/admin/users/{id}")
    async def update_user(id: str, payload: dict = Body(...), authorization: Optional[str] = Header(None)):
        current_user(authorization)
        if id not in backend.users:
            raise HTTPException(status_code=404, detail="User not found")
        backend.users[id].update(payload)
        return backend.users[id]

    @router.delete("/admin/users/{id}")
    async def delete_user(id: str, authorization: Optional[str] = Header(None)):
        current_user(authorization)
        if backend.users.pop(id, None) is None:
            raise HTTPException(status_code=404, detail="User not found")
        return {"message": "Deleted"}

    @router.get("/admin/audit-logs")
    async def audit_logs(authorization: Optional[str] = Header(None)):
        current_user(authorization)
        return backend.audit_logs

    # Notifications
    @router.get("/notifications")
    async def list_notifications(authorization: Optional[str] = Header(None)):
        user = current_user(authorization)
        return [n for n in backend.notifications if n["userId"] == user["_id"]]

    @router.put("/notifications/read-all")
    async def read_all(authorization: Optional[str] = Header(None)):
        user = current_user(authorization)
        for notification in backend.notifications:
            if notification["userId"] == user["_id"]:
                notification["isRead"] = True
        return {"message": "All notifications marked as read"}

    app.include_router(router, prefix="/api")
    return app
