CATEGORIES = ["Emoción", "Dinámica", "Fortaleza", "Riesgo"]

PATTERN_SCORE = {
    "value": 7.2,
    "label": "Balance emocional",
    "interpretation": "La conversación muestra cariño constante, con momentos de tensión que se resuelven casi siempre el mismo día."
}

PATTERN_BANK = {
    "Emoción": [
        {
            "title": "Picos de ansiedad en horarios nocturnos",
            "description": "Los mensajes con preocupación o inseguridad se concentran después de las 23:00. Es el momento en que más se piden confirmaciones.",
            "evidence": "¿Sigues enojado? no puedo dormir así"
        },
        {
            "title": "Afecto expresado con apodos y emojis",
            "description": "El cariño aparece sobre todo en forma de apodos y emojis, más que en frases largas. Ambos lo usan en los saludos del día.",
            "evidence": "buenos días mi vida ☀️❤️"
        }
    ],
    "Dinámica": [
        {
            "title": "Desbalance en quién inicia las conversaciones",
            "description": "Una de las personas abre la conversación en la mayoría de los días. La otra responde rápido, pero rara vez empieza.",
            "evidence": "hola? 👀 estás?"
        },
        {
            "title": "Ciclos de reconciliación tras conflictos",
            "description": "Después de una discusión hay unas horas de silencio seguidas de un mensaje conciliador. El ciclo se repite con el mismo orden.",
            "evidence": "perdón por lo de hace rato, hablamos?"
        }
    ],
    "Fortaleza": [
        {
            "title": "Planes concretos a futuro",
            "description": "Hay conversaciones frecuentes sobre viajes, fechas y proyectos compartidos. Los planes se concretan con días y lugares.",
            "evidence": "entonces en marzo nos vamos a la playa"
        },
        {
            "title": "Humor compartido para bajar la tensión",
            "description": "Las bromas internas aparecen justo cuando una conversación se pone seria. Ayudan a cerrar temas sin escalar.",
            "evidence": "jajaja ya, tregua de memes"
        }
    ],
    "Riesgo": [
        {
            "title": "Temas que se cierran sin resolverse",
            "description": "Algunas discusiones terminan con un cambio de tema y vuelven semanas después con la misma forma.",
            "evidence": "mejor no hablemos de eso ahora"
        },
        {
            "title": "Respuestas cortas en momentos de estrés",
            "description": "En semanas de mucho trabajo las respuestas se vuelven monosílabos. La otra persona lo interpreta como distancia.",
            "evidence": "ok. luego te digo"
        }
    ]
}

TL_DR = [
    "La conversación es afectuosa y estable la mayor parte del tiempo.",
    "Los conflictos se repiten con el mismo guion y se cierran rápido, pero no siempre se resuelven.",
    "Quién inicia el contacto está desbalanceado y vale la pena hablarlo."
]

STRENGTHS = [
    "Planes concretos y compartidos que se repiten a lo largo de los meses.",
    "Humor como herramienta para desescalar sin invalidar al otro.",
    "Reconciliación rápida después de los desacuerdos."
]

AREAS_TO_WATCH = [
    "Temas pendientes que reaparecen sin cierre.",
    "Interpretación de respuestas cortas como falta de interés.",
    "Mensajes de inseguridad concentrados en la noche."
]

SECTIONS = [
    {
        "id": "resumen",
        "title": "Resumen",
        "body": "Un vínculo con base afectiva clara, rutinas de contacto diarias y un patrón de conflicto reconocible que se resuelve rápido en lo emocional, pero deja temas abiertos."
    },
    {
        "id": "comunicacion",
        "title": "Comunicación",
        "body": "La mayoría de los intercambios son breves y frecuentes. Las conversaciones largas aparecen casi siempre después de un desacuerdo."
    },
    {
        "id": "recomendaciones",
        "title": "Recomendaciones",
        "body": "Elegir un momento tranquilo para retomar los temas pendientes y acordar cómo avisar cuando uno está saturado de trabajo."
    }
]

# one pattern per category, in this order, for the free report
DEMO_CATEGORIES = ["Emoción", "Dinámica", "Fortaleza"]


def fixture_patterns(mode):
    if mode == "full":
        patterns = []
        for category in CATEGORIES:
            for item in PATTERN_BANK[category]:
                patterns.append(dict(item, category=category))
        return patterns

    return [
        {
            "title": PATTERN_BANK[category][0]["title"],
            "description": PATTERN_BANK[category][0]["description"],
            "category": category
        }
        for category in DEMO_CATEGORIES
    ]


def fixture_evidence():
    return [
        {
            "pattern": item["title"],
            "quote": item["evidence"],
            "context": item["description"]
        }
        for category in CATEGORIES
        for item in PATTERN_BANK[category][:1]
    ]


def fixture_analysis(mode):
    """Hard-coded analysis payload in the same shape the model is asked to return"""
    analysis = {
        "patternScore": dict(PATTERN_SCORE),
        "patterns": fixture_patterns(mode)
    }
    if mode == "full":
        analysis["tlDr"] = list(TL_DR)
        analysis["strengths"] = list(STRENGTHS)
        analysis["areasToWatch"] = list(AREAS_TO_WATCH)
        analysis["evidence"] = fixture_evidence()
        analysis["sections"] = [dict(s) for s in SECTIONS]
    return analysis
