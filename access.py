SESSION_KEY = "patternlabs_access"

PURCHASE_CREDITS = 3

NO_ACCESS_MESSAGE = "Para hacerle preguntas a la IA primero desbloquea tu análisis completo 🧠"
NO_CREDITS_MESSAGE = (
    "Ya utilizaste tus 3 preguntas incluidas. Muy pronto podrás comprar más preguntas "
    "para seguir explorando tu chat. 🙌"
)


class AccessState:
    """Paid access flag and remaining question credits for one browser session.

    The record lives in the signed session cookie under SESSION_KEY as
    {"hasAccess": bool, "credits": int}. A stored record is only honoured
    when it grants access with a non-negative credit count; anything else
    is discarded on load.
    """

    def __init__(self, has_access=False, credits=0):
        self.has_access = has_access
        self.credits = credits

    @classmethod
    def load(cls, session):
        stored = session.get(SESSION_KEY)
        if stored is None:
            return cls()

        try:
            has_access = stored.get("hasAccess") is True
            credits = stored.get("credits")
            if has_access and isinstance(credits, int) and not isinstance(credits, bool) and credits >= 0:
                return cls(True, credits)
        except AttributeError:
            print(f"⚠️ Malformed access record in session: {stored!r}")

        session.pop(SESSION_KEY, None)
        return cls()

    def save(self, session):
        session[SESSION_KEY] = self.to_dict()

    def to_dict(self):
        return {"hasAccess": self.has_access, "credits": self.credits}

    def grant(self, credits=PURCHASE_CREDITS):
        # purchases stack on top of whatever is left
        self.has_access = True
        self.credits += credits

    def consume(self):
        self.credits = max(self.credits - 1, 0)

    def can_ask(self):
        if not self.has_access:
            return False, NO_ACCESS_MESSAGE
        if self.credits <= 0:
            return False, NO_CREDITS_MESSAGE
        return True, None

    def reset(self, session):
        self.has_access = False
        self.credits = 0
        session.pop(SESSION_KEY, None)

    def simulate_purchase(self):
        self.has_access = True
        self.credits = PURCHASE_CREDITS
