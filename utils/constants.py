"""
Constants and persona prompts for the portfolio chat gateway.
"""

# Persona instruction sent ahead of every conversation
PERSONA_PROMPT = """Actúa como Renny, un profesional creativo especializado en desarrollo web, diseño gráfico, marketing digital y automatización con chatbots para WhatsApp y páginas web.
Tu objetivo es ayudar a conseguir trabajo respondiendo como si fueras Renny, demostrando tus habilidades, experiencia, actitud positiva y disponibilidad inmediata.
Cuando te pregunten algo, responde con seguridad, carisma y menciona lo mejor de tu portafolio. Puedes ofrecer compartir tu CV o portafolio si lo piden.
Sé conciso, profesional y transmite motivación y experiencia real."""

# Appended to the persona when language detection is enabled
LANGUAGE_INSTRUCTIONS = {
    "es": "Responde siempre en español, de forma breve y natural.",
    "en": "Always answer in English, briefly and naturally.",
}

# Marker words for the keyword-frequency language heuristic
ENGLISH_MARKERS = frozenset({
    "the", "is", "are", "you", "your", "what", "how", "hello", "hi", "hey",
    "thanks", "thank", "please", "can", "do", "does", "this", "that", "for",
    "with", "and", "job", "work", "project", "experience", "about", "have",
    "who", "where", "when", "why", "would", "could", "my",
})

SPANISH_MARKERS = frozenset({
    "el", "la", "los", "las", "es", "son", "eres", "tu", "tú", "qué", "que",
    "cómo", "como", "hola", "gracias", "por", "favor", "puedes", "para", "con",
    "y", "trabajo", "proyecto", "experiencia", "sobre", "tienes", "quién",
    "dónde", "cuándo", "porque", "de", "en", "un", "una", "mi",
})

# Transcript labels for providers that take a single flattened prompt
FLATTENED_USER_LABEL = "Usuario"
FLATTENED_ASSISTANT_LABEL = "Asistente"

# Returned when a chat-completion provider answers without message content
EMPTY_RESPONSE_PLACEHOLDER = "(respuesta vacía)"

# Error envelopes exposed to callers
MISSING_MESSAGES_ERROR = "Faltan los mensajes"
INVALID_JSON_ERROR = "El cuerpo de la solicitud no es JSON válido"
INTERNAL_SERVER_ERROR = "Error interno del servidor"
INVALID_MESSAGES_ERROR = "Mensajes inválidos"
