"""API — camada de borda HTTP.

Responsabilidades:
- Receber requests e validar payloads (pydantic)
- Autenticar por API key
- Delegar para os serviços do container
- Converter erros do núcleo no envelope {success, error}

NÃO PODE conter: FSM, regras de conexão, orquestração de envio.
"""
