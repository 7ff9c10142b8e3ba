from pydantic import BaseModel, ConfigDict
from typing import Any, Dict

# Sampling settings sent with every forwarded conversation.
GENERATION_CONFIG: Dict[str, Any] = {
    "temperature": 0.7,
    "topK": 40,
    "topP": 0.95,
    "maxOutputTokens": 2048,
}

class ProxyChatRequest(BaseModel):
    """
    Inbound chat body. Both fields are forwarded as-is; shape problems are
    left for the Gemini API to report.
    """
    model_config = ConfigDict(extra="ignore")

    messages: Any = None
    systemPrompt: Any = None

    @classmethod
    def from_body(cls, body: Any) -> "ProxyChatRequest":
        """
        Reads the chat fields from a parsed JSON body. Arrays and scalars carry
        neither field; a null body has no fields to read at all.

        Raises:
            ValueError: when the body is null.
        """
        if body is None:
            raise ValueError("chat request body is null")
        return cls.model_validate(body if isinstance(body, dict) else {})

    def to_generate_content(self) -> Dict[str, Any]:
        """Builds the generateContent request body.

        Fields missing from the inbound body are left out, the same way a JSON
        serializer drops undefined values.
        """
        sent = self.model_fields_set
        payload: Dict[str, Any] = {}
        if "messages" in sent:
            payload["contents"] = self.messages
        part = {"text": self.systemPrompt} if "systemPrompt" in sent else {}
        payload["systemInstruction"] = {"parts": [part]}
        payload["generationConfig"] = dict(GENERATION_CONFIG)
        return payload
