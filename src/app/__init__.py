"""App: núcleo do serviço de Examples: regras, orquestração e infraestrutura.

Subpastas:
- bootstrap/: composition root (factories, inicialização, wiring)
- coordinators/: processamento de eventos consumidos do stream
- use_cases/: orquestração (serviço + colaborador externo)
- services/: regras de negócio e tasks em background
- domain/: entidade, eventos e erros de aplicação
- infra/: implementações concretas de IO (SQL, Redis, HTTP, i18n)
- protocols/: contratos/interfaces
- observability/: contexto de requisição e métricas via log

Padrão: app executa; api adapta; config configura; utils apoia.
"""
