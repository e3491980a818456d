import stripe


class PaymentConfigError(Exception):
    pass


def get_stripe(secret_key):
    """Configure the Stripe SDK on first use"""
    if not secret_key:
        raise PaymentConfigError("STRIPE_SECRET_KEY is not configured")
    if stripe.api_key != secret_key:
        print(f"🔧 Initializing Stripe with key: {secret_key[:15]}...")
        stripe.api_key = secret_key
    return stripe


def create_single_checkout(config, email=None):
    client = get_stripe(config.get("STRIPE_SECRET_KEY"))
    app_url = config.get("APP_URL", "").rstrip("/")

    params = {
        "mode": "payment",
        "payment_method_types": ["card"],
        "line_items": [{
            "price": config.get("STRIPE_PRICE_SINGLE", ""),
            "quantity": 1,
        }],
        "success_url": f"{app_url}/?session_id={{CHECKOUT_SESSION_ID}}",
        "cancel_url": f"{app_url}/?canceled=1",
        "metadata": {
            "type": "single_analysis"
        },
    }
    if email:
        params["customer_email"] = email

    checkout_session = client.checkout.Session.create(**params)
    print(f"✅ Stripe checkout session created: {checkout_session.id}")
    return checkout_session.url


def is_session_paid(config, session_id):
    client = get_stripe(config.get("STRIPE_SECRET_KEY"))
    checkout_session = client.checkout.Session.retrieve(session_id)
    return checkout_session.payment_status == "paid"


def config_report(config):
    secret_key = config.get("STRIPE_SECRET_KEY") or ""
    price_id = config.get("STRIPE_PRICE_SINGLE") or ""
    return {
        "secretKeyExists": bool(secret_key),
        "secretKeyLength": len(secret_key),
        "secretKeyMode": "live" if secret_key.startswith("sk_live") else "test" if secret_key.startswith("sk_test") else "unknown",
        "priceIdExists": bool(price_id),
        "priceIdLength": len(price_id),
        "secretKeyHasSpaces": secret_key != secret_key.strip(),
        "priceIdHasSpaces": price_id != price_id.strip(),
        "appUrl": config.get("APP_URL"),
    }
