"""API: camada de borda HTTP (FastAPI).

Responsabilidades:
- Receber requests e validar payloads (DTOs pydantic)
- Propagar contexto (correlation_id, user_id, idioma)
- Delegar para use cases
- Traduzir erros de aplicação em respostas localizadas

NÃO PODE conter: regras de negócio nem acesso direto a persistência.
"""
