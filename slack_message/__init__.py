"""Envio de notificações de pipeline para um Incoming Webhook do Slack.

Este pacote contém:
- constants: variáveis de ambiente e valores padrão das opções
- errors: ConfigurationError / DeliveryError
- request: NotificationRequest (opções tipadas + fallback por env)
- utils: trim, conversão de links, quebras de linha e canal
- enrichment: fatos do build (lane, git) para os campos padrão
- formatters: montagem e deep merge do attachment
- services: cliente HTTP do webhook (DeliveryResult)
- controller: orquestra request -> attachment -> envio
- cli: entrada de linha de comando
"""
