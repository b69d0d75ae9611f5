"""App — núcleo de conexão e envio do WhatsApp.

Subpastas:
- bootstrap/: composition root (factories, container, inicialização)
- domain/: eventos do transporte, registros e resultados
- services/: conexão, envio, envio em massa e webhook
- infra/: implementações concretas de IO (stores de credenciais)
- protocols/: contratos (transporte, store de credenciais)
- observability/: correlation_id para logs estruturados

Padrão: app executa; api adapta; fsm governa; utils apoia.
"""
