from openai import OpenAI

MAX_CHAT_CHARS = 20000

NO_ANSWER = "No pude generar una respuesta."

PROMPT_TEMPLATE = """Eres un psicólogo experto en dinámicas afectivas.

Responde de manera empática, útil y basada en datos REALES del análisis y del chat.
No inventes información.

ANÁLISIS PREVIO:
{analysis}

ÚLTIMOS MENSAJES DEL CHAT (recortado automáticamente):
{chat}

PREGUNTA DEL USUARIO:
{question}"""


class ChatConfigError(Exception):
    pass


def trim_chat(full_chat):
    if len(full_chat) > MAX_CHAT_CHARS:
        return full_chat[-MAX_CHAT_CHARS:]
    return full_chat


def build_prompt(analysis, full_chat, question):
    return PROMPT_TEMPLATE.format(
        analysis=analysis or "",
        chat=trim_chat(full_chat),
        question=question
    ).strip()


def get_client(api_key):
    if not api_key:
        raise ChatConfigError("Falta la variable OPENAI_API_KEY en el servidor.")
    return OpenAI(api_key=api_key)


def answer_question(client, analysis, full_chat, question, model="gpt-4.1-mini"):
    """Forward one follow-up question to the Responses API and return its text"""
    response = client.responses.create(
        model=model,
        input=build_prompt(analysis, full_chat, question),
        max_output_tokens=500
    )
    answer = (getattr(response, "output_text", None) or "").strip()
    return answer or NO_ANSWER
