"""
Services module for business logic.

ARCHITECTURE:
    Router (thin) -> OptionService (lifecycle rules) -> OptionRepository -> Model

- option_service: OptionService, the lifecycle of one option kind
- crud/: Repository and soft delete helpers
- ids: Sequence and token id strategies
- validation: Field rules and uniqueness checks
- events/: Outbox change events and the export processor

Usage:
    from options_api.services.option_service import OptionService
    service = OptionService(db, get_entity("gender_option"))
    options = service.read_all()
"""
