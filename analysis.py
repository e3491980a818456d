import json
import numbers

from openai import OpenAI

from pattern_fixtures import fixture_analysis

MAX_CHARS_DEMO = 80000
MAX_CHARS_FULL = 100000

DEFAULT_SCORE = 7.5
DEFAULT_SCORE_LABEL = "Balance emocional"
DEFAULT_INTERPRETATION = "Se observa un balance general en la comunicación."

PAID_ONLY_FIELDS = ["tlDr", "strengths", "areasToWatch", "evidence", "sections"]

INVALID_OUTPUT_MESSAGE = "La IA devolvió una respuesta inválida. Intenta nuevamente o sube otro chat."

SYSTEM_PROMPT = """Eres un analista de conversaciones de WhatsApp.

No generalices ni uses frases vagas. No diagnostiques a nadie. No uses lenguaje alarmista.
Cada afirmación debe apoyarse en el chat y las citas deben ser textuales (máximo 60 caracteres).
Usa un tono neutro y empático.

Devuelve SOLO este JSON:

{
  "patternScore": {"value": número de 0 a 10, "label": "Balance emocional", "interpretation": "1-2 frases"},
  "patterns": [
    {"title": "...", "description": "1-2 frases", "category": "Emoción" | "Dinámica" | "Fortaleza" | "Riesgo", "evidence": "cita corta (solo modo FULL)"}
  ],
  "tlDr": ["..."],
  "strengths": ["..."],
  "areasToWatch": ["..."],
  "evidence": [{"pattern": "...", "quote": "...", "context": "..."}]
}

Modo DEMO: exactamente 3 patrones (1 Emoción, 1 Dinámica, 1 Fortaleza).
Modo FULL: exactamente 8 patrones (2 de cada categoría) con "evidence" en cada uno."""


class AnalysisError(Exception):
    pass


class InvalidModelOutput(AnalysisError):
    def __init__(self, raw):
        super().__init__(INVALID_OUTPUT_MESSAGE)
        self.raw = raw


def resolve_mode(raw):
    return "full" if raw == "full" else "free"


def truncate_chat(text, mode):
    """Keep the most recent part of the chat that fits the mode's budget"""
    limit = MAX_CHARS_FULL if mode == "full" else MAX_CHARS_DEMO
    if len(text) <= limit:
        return text, False
    return text[-limit:], True


def build_user_prompt(chat, mode, truncated):
    if mode == "full":
        mode_line = "MODO: FULL (8 patrones con evidencia: 2 Emoción, 2 Dinámica, 2 Fortaleza, 2 Riesgo)"
        evidence_rule = 'Incluye el campo "evidence" en cada patrón con una cita corta'
    else:
        mode_line = "MODO: DEMO (3 patrones: 1 Emoción, 1 Dinámica, 1 Fortaleza)"
        evidence_rule = 'NO incluyas el campo "evidence" en los patrones'

    rules = [
        "Cada línea es un mensaje",
        'El nombre antes de ":" indica quién habla',
        "El orden es cronológico",
        "NO infieras más allá del texto",
    ]
    if truncated:
        rules.append("El chat fue recortado a los mensajes más recientes, analiza solo lo que ves")
    rules.append(evidence_rule)

    header = "Este es un chat exportado de WhatsApp"
    if truncated:
        header += " (mensajes más recientes debido al tamaño)"

    return "{}\n\n{}.\n\nReglas:\n{}\n\nCHAT:\n{}".format(
        mode_line,
        header,
        "\n".join(f"- {rule}" for rule in rules),
        chat
    )


def strip_code_fence(result):
    result = result.strip()
    if result.startswith("```json"):
        result = result[7:]
    elif result.startswith("```"):
        result = result[3:]
    if result.endswith("```"):
        result = result[:-3]
    return result.strip()


def parse_model_output(raw):
    try:
        parsed = json.loads(strip_code_fence(raw))
    except ValueError:
        print(f"❌ Invalid JSON from model: {raw[:500]}")
        raise InvalidModelOutput(raw)
    if not isinstance(parsed, dict):
        print(f"❌ Model returned {type(parsed).__name__} instead of an object")
        raise InvalidModelOutput(raw)
    return parsed


def _score_value(value):
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return DEFAULT_SCORE
    return max(0.0, min(10.0, float(value)))


def normalize_analysis(parsed, mode):
    """Coerce a parsed analysis into the report schema for the given mode"""
    score = parsed.get("patternScore")
    if not isinstance(score, dict):
        score = {}

    patterns = parsed.get("patterns")
    if not isinstance(patterns, list):
        patterns = []
    patterns = [dict(p) for p in patterns if isinstance(p, dict)]
    if mode != "full":
        for pattern in patterns:
            pattern.pop("evidence", None)

    normalized = {
        "patternScore": {
            "value": _score_value(score.get("value")),
            "label": score.get("label") or DEFAULT_SCORE_LABEL,
            "interpretation": score.get("interpretation") or DEFAULT_INTERPRETATION
        },
        "patterns": patterns
    }

    if mode == "full":
        for field in PAID_ONLY_FIELDS:
            if isinstance(parsed.get(field), list):
                normalized[field] = parsed[field]

    return normalized


def get_openai_client(api_key):
    if not api_key:
        raise AnalysisError("Falta la variable OPENAI_API_KEY en el servidor.")
    return OpenAI(api_key=api_key)


def run_model_analysis(client, chat, mode, truncated, model="gpt-4o-mini"):
    completion = client.chat.completions.create(
        model=model,
        temperature=0.2,
        messages=[
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": build_user_prompt(chat, mode, truncated)}
        ]
    )
    content = completion.choices[0].message.content if completion.choices else None
    raw = (content or "").strip()
    print(f"🧠 Model output length: {len(raw)} characters")
    return parse_model_output(raw)


def build_report(text, file_name, mode, backend="fixture", client=None, model="gpt-4o-mini"):
    """Turn an uploaded chat into a report dict.

    The default backend answers with the hard-coded fixture; the "openai"
    backend asks the completions API and normalizes its JSON. Either way the
    chat is truncated to the mode's budget first and the processed text is
    carried in the report so follow-up questions can use it.
    """
    mode = resolve_mode(mode)
    length = len(text)

    print(f"📄 FILE: {file_name}")
    print(f"📏 LENGTH: {length}")
    print(f"🎯 MODE: {'FULL' if mode == 'full' else 'DEMO'} ({backend})")

    processed, truncated = truncate_chat(text, mode)
    if truncated:
        print(f"✂️ Chat truncated from {length} to {len(processed)} characters (keeping most recent)")

    if backend == "openai":
        parsed = run_model_analysis(client, processed, mode, truncated, model=model)
    elif backend == "fixture":
        parsed = fixture_analysis(mode)
    else:
        raise AnalysisError(f"Unknown analysis backend: {backend}")

    analysis = normalize_analysis(parsed, mode)

    report = {
        "ok": True,
        "version": "full" if mode == "full" else "demo",
        "fileName": file_name,
        "length": length
    }
    report.update(analysis)
    report["rawAnalysis"] = json.dumps(parsed, ensure_ascii=False)
    report["fullChat"] = processed
    report["truncated"] = truncated
    report["processedLength"] = len(processed)
    return report
