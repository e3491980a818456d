from flask import Flask, request, jsonify, redirect, render_template, session, flash, url_for, abort
from flask_cors import CORS
import openai
import stripe

import analysis
import chat_proxy
import payments
from access import AccessState
from settings import load_settings, dev_tools_enabled
from store import get_store

app = Flask(__name__)
app.config.from_mapping(load_settings())
CORS(app, resources={r"/api/*": {"origins": app.config["ALLOWED_ORIGINS"]}})

NO_FILE_MESSAGE = "No se recibió ningún archivo .txt."
EMPTY_FILE_MESSAGE = "El archivo está vacío."
MISSING_QUESTION_DATA = "Faltan datos para responder la pregunta."
CHAT_PROVIDER_ERROR = "Error al responder tu pregunta con la IA."


class UploadError(Exception):
    pass


def get_app_store():
    if "patternlabs_store" not in app.extensions:
        app.extensions["patternlabs_store"] = get_store(app.config)
    return app.extensions["patternlabs_store"]


def read_upload(upload):
    if upload is None:
        raise UploadError(NO_FILE_MESSAGE)
    text = upload.read().decode("utf-8-sig", errors="replace")
    if not text.strip():
        raise UploadError(EMPTY_FILE_MESSAGE)
    return text, upload.filename or "chat.txt"


def run_analysis(text, file_name, mode):
    """Build the report for an upload and persist it; returns the report with its id"""
    backend = app.config["ANALYZE_BACKEND"]
    client = None
    if backend == "openai":
        client = analysis.get_openai_client(app.config["OPENAI_API_KEY"])

    report = analysis.build_report(
        text, file_name, mode,
        backend=backend,
        client=client,
        model=app.config["ANALYZE_MODEL"]
    )
    report["reportId"] = get_app_store().save_report(report)
    return report


def analysis_error_message(e):
    if isinstance(e, analysis.InvalidModelOutput):
        return analysis.INVALID_OUTPUT_MESSAGE
    return str(e) or "Ocurrió un error inesperado al generar el reporte."


# ---------------------------------------------------------------------------
# JSON API
# ---------------------------------------------------------------------------

@app.route("/api/analyze", methods=["POST"])
def api_analyze():
    try:
        text, file_name = read_upload(request.files.get("file"))
    except UploadError as e:
        return jsonify({"error": str(e)}), 400

    mode = analysis.resolve_mode(request.form.get("mode", "free"))

    try:
        report = run_analysis(text, file_name, mode)
    except Exception as e:
        print(f"❌ Error in /api/analyze: {e}")
        return jsonify({"error": analysis_error_message(e)}), 500

    if report["truncated"]:
        print(f"ℹ️ Original chat: {report['length']} chars → processed: {report['processedLength']} chars")
    return jsonify(report)


@app.route("/api/chat", methods=["POST"])
def api_chat():
    try:
        client = chat_proxy.get_client(app.config["OPENAI_API_KEY"])
    except chat_proxy.ChatConfigError as e:
        return jsonify({"error": str(e)}), 500

    data = request.get_json(silent=True) or {}
    full_chat = data.get("fullChat")
    question = data.get("question")

    if not isinstance(full_chat, str) or not isinstance(question, str) or not full_chat or not question:
        return jsonify({"error": MISSING_QUESTION_DATA}), 400

    try:
        answer = chat_proxy.answer_question(
            client, data.get("analysis"), full_chat, question,
            model=app.config["CHAT_MODEL"]
        )
    except openai.OpenAIError as e:
        print(f"❌ OpenAI /api/chat error: {e}")
        return jsonify({"error": CHAT_PROVIDER_ERROR}), 500
    except Exception as e:
        print(f"❌ Error in /api/chat: {e}")
        return jsonify({"error": str(e) or "Ocurrió un error inesperado al responder tu pregunta."}), 500

    return jsonify({"answer": answer})


@app.route("/api/stripe/checkout/single", methods=["POST"])
def api_checkout_single():
    data = request.get_json(silent=True) or {}

    try:
        url = payments.create_single_checkout(app.config, email=data.get("email"))
    except stripe.StripeError as e:
        print(f"❌ Stripe single error: {e}")
        return jsonify({"error": e.user_message or str(e) or "Stripe error"}), 500
    except Exception as e:
        print(f"❌ Stripe single error: {e}")
        return jsonify({"error": str(e) or "Stripe error"}), 500

    return jsonify({"url": url}), 200


@app.route("/api/stripe/confirm", methods=["GET"])
def api_stripe_confirm():
    session_id = request.args.get("session_id")
    if not session_id:
        return jsonify({"ok": False, "reason": "Missing session_id"}), 400

    try:
        paid = payments.is_session_paid(app.config, session_id)
    except Exception as e:
        print(f"❌ Stripe confirm error: {e}")
        return jsonify({"ok": False, "reason": "Stripe error"}), 500

    return jsonify({"ok": paid})


@app.route("/api/stripe/test", methods=["GET"])
def api_stripe_test():
    if not dev_tools_enabled(app.config):
        abort(404)
    return jsonify(payments.config_report(app.config))


@app.route("/api/report/<report_id>", methods=["GET"])
def api_report(report_id):
    report = get_app_store().get_report(report_id)
    if report is None:
        return jsonify({"error": "Reporte no encontrado", "reportId": report_id}), 404
    return jsonify(report)


@app.route("/health", methods=["GET"])
def health_check():
    return jsonify({"status": "healthy", "message": "PatternLabs server is running"})


# ---------------------------------------------------------------------------
# Page flow
# ---------------------------------------------------------------------------

def confirm_return_from_checkout(state, session_id):
    try:
        paid = payments.is_session_paid(app.config, session_id)
    except Exception as e:
        print(f"❌ Stripe confirm error: {e}")
        flash("Ocurrió un problema al confirmar el pago. Intenta recargar la página.")
        return

    if not paid:
        flash("No se pudo confirmar el pago. Si ya se te cobró, contáctanos.")
        return

    if get_app_store().mark_session_redeemed(session_id):
        state.grant()
        state.save(session)
        session.pop("report_id", None)
        session.pop("demo_question", None)
        print(f"✅ Payment confirmed for checkout session {session_id}")
        flash("Pago confirmado ✅ +3 preguntas desbloqueadas. ¡Pregúntale lo que quieras a la IA!")
    else:
        flash("Este pago ya fue aplicado a tu cuenta.")


@app.route("/", methods=["GET"])
def index():
    state = AccessState.load(session)

    session_id = request.args.get("session_id")
    if session_id:
        confirm_return_from_checkout(state, session_id)
        return redirect(url_for("index"))

    if request.args.get("canceled"):
        flash("Pago cancelado. Puedes intentarlo de nuevo cuando quieras.")
        return redirect(url_for("index"))

    report = None
    chat_history = []
    report_id = session.get("report_id")
    if report_id:
        store = get_app_store()
        report = store.get_report(report_id)
        if report is None:
            session.pop("report_id", None)
        else:
            chat_history = store.get_chat(report_id)

    can_ask, ask_error = state.can_ask()
    return render_template(
        "index.html",
        state=state,
        report=report,
        chat_history=chat_history,
        can_ask=can_ask,
        ask_error=ask_error,
        pending_question=session.pop("pending_question", ""),
        demo_question=session.get("demo_question"),
        dev_tools=dev_tools_enabled(app.config),
    )


@app.route("/upload", methods=["POST"])
def upload():
    state = AccessState.load(session)

    try:
        text, file_name = read_upload(request.files.get("file"))
    except UploadError as e:
        flash(str(e))
        return redirect(url_for("index"))

    mode = "full" if state.has_access else "free"
    try:
        report = run_analysis(text, file_name, mode)
    except Exception as e:
        print(f"❌ Upload analysis error: {e}")
        flash(analysis_error_message(e))
        return redirect(url_for("index"))

    session["report_id"] = report["reportId"]
    session.pop("demo_question", None)
    if state.has_access:
        flash("Reporte completo generado correctamente. 🎯")
    else:
        flash("Reporte demo generado correctamente. 🎯")
    return redirect(url_for("index") + "#conversation-report")


@app.route("/checkout", methods=["POST"])
def checkout():
    try:
        url = payments.create_single_checkout(app.config, email=request.form.get("email") or None)
    except Exception as e:
        print(f"❌ Stripe error: {e}")
        flash(str(e) or "No se pudo iniciar el pago. Intenta de nuevo.")
        return redirect(url_for("index"))
    return redirect(url, code=303)


@app.route("/demo-ask", methods=["POST"])
def demo_ask():
    question = (request.form.get("question") or "").strip()
    if question:
        session["demo_question"] = question
    return redirect(url_for("index") + "#demo-question")


@app.route("/ask", methods=["POST"])
def ask():
    state = AccessState.load(session)
    question = (request.form.get("question") or "").strip()
    if not question:
        return redirect(url_for("index"))

    ok, error = state.can_ask()
    if not ok:
        flash(error)
        return redirect(url_for("index"))

    store = get_app_store()
    report_id = session.get("report_id")
    report = store.get_report(report_id) if report_id else None
    if report is None:
        flash("Sube tu chat primero para poder hacerle preguntas a la IA.")
        return redirect(url_for("index"))

    try:
        client = chat_proxy.get_client(app.config["OPENAI_API_KEY"])
        answer = chat_proxy.answer_question(
            client, report.get("rawAnalysis"), report.get("fullChat", ""), question,
            model=app.config["CHAT_MODEL"]
        )
    except Exception as e:
        print(f"❌ Chat error: {e}")
        flash(str(e) if isinstance(e, chat_proxy.ChatConfigError) else CHAT_PROVIDER_ERROR)
        session["pending_question"] = question
        return redirect(url_for("index"))

    store.append_chat(report_id, question, answer)
    state.consume()
    state.save(session)
    return redirect(url_for("index") + "#chat")


@app.route("/access/reset", methods=["POST"])
def reset_access():
    if not dev_tools_enabled(app.config):
        abort(404)
    state = AccessState.load(session)
    state.reset(session)
    session.pop("report_id", None)
    session.pop("demo_question", None)
    print("🔄 Access state reset")
    flash("✅ Estado reiniciado. Sube un chat para ver el demo.")
    return redirect(url_for("index"))


@app.route("/access/simulate", methods=["POST"])
def simulate_purchase():
    if not dev_tools_enabled(app.config):
        abort(404)
    state = AccessState.load(session)
    state.simulate_purchase()
    state.save(session)
    flash("✅ [DEV] Pago simulado. Tienes 3 preguntas con la IA.")
    return redirect(url_for("index"))


@app.route("/report/<report_id>", methods=["GET"])
def report_page(report_id):
    report = get_app_store().get_report(report_id)
    if report is None:
        abort(404)
    return render_template("report.html", report=report)


if __name__ == "__main__":
    print("🚀 Starting PatternLabs server...")
    print("📍 Server will be available at: http://localhost:5000")
    app.run(debug=app.config["APP_ENV"] != "production", port=5000, host="0.0.0.0")
