import uuid

import firebase_admin
from firebase_admin import credentials, firestore
from google.api_core.exceptions import Conflict

REPORTS = "reports"
CHECKOUT_SESSIONS = "checkout_sessions"
CHAT_HISTORY = "chat_history"


class MemoryStore:
    """Dict-backed store for local development and tests"""

    def __init__(self):
        self.collections = {REPORTS: {}, CHECKOUT_SESSIONS: {}, CHAT_HISTORY: {}}

    def save_report(self, report):
        report_id = report.get("reportId") or uuid.uuid4().hex
        self.collections[REPORTS][report_id] = dict(report, reportId=report_id)
        return report_id

    def get_report(self, report_id):
        report = self.collections[REPORTS].get(report_id)
        return dict(report) if report else None

    def mark_session_redeemed(self, session_id):
        if session_id in self.collections[CHECKOUT_SESSIONS]:
            return False
        self.collections[CHECKOUT_SESSIONS][session_id] = {"redeemed": True}
        return True

    def append_chat(self, report_id, question, answer):
        history = self.collections[CHAT_HISTORY].setdefault(report_id, [])
        history.append({"question": question, "answer": answer})

    def get_chat(self, report_id):
        return list(self.collections[CHAT_HISTORY].get(report_id, []))


class FirestoreStore:
    def __init__(self, db):
        self.db = db

    def save_report(self, report):
        report_id = report.get("reportId") or uuid.uuid4().hex
        self.db.collection(REPORTS).document(report_id).set(dict(report, reportId=report_id))
        print(f"💾 Report saved to Firebase: {report_id}")
        return report_id

    def get_report(self, report_id):
        doc = self.db.collection(REPORTS).document(report_id).get()
        if not doc.exists:
            return None
        return doc.to_dict()

    def mark_session_redeemed(self, session_id):
        # create() fails when the document already exists, so only the first redemption wins
        try:
            self.db.collection(CHECKOUT_SESSIONS).document(session_id).create({"redeemed": True})
        except Conflict:
            print(f"⚠️ Checkout session already redeemed: {session_id}")
            return False
        return True

    def append_chat(self, report_id, question, answer):
        doc_ref = self.db.collection(CHAT_HISTORY).document(report_id)
        # ArrayUnion drops equal elements, so each entry carries its own id
        entry = {"id": uuid.uuid4().hex, "question": question, "answer": answer}
        doc_ref.set({"messages": firestore.ArrayUnion([entry])}, merge=True)

    def get_chat(self, report_id):
        doc = self.db.collection(CHAT_HISTORY).document(report_id).get()
        if not doc.exists:
            return []
        return [
            {"question": m.get("question", ""), "answer": m.get("answer", "")}
            for m in doc.to_dict().get("messages", [])
        ]


def connect_firestore(credentials_path):
    try:
        firebase_admin.get_app()
    except ValueError:
        cred = credentials.Certificate(credentials_path)
        firebase_admin.initialize_app(cred)
    return firestore.client()


def get_store(config):
    backend = config.get("STORE_BACKEND", "memory")
    if backend == "firestore":
        return FirestoreStore(connect_firestore(config.get("FIREBASE_CREDENTIALS")))
    if backend == "memory":
        return MemoryStore()
    raise ValueError(f"Unknown store backend: {backend}")

