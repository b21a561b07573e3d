"""Signal scoring, advisory validation and batch orchestration."""
from signals.scorer import SignalScorer, market_commentary
from signals.provider import AdvisoryProvider, CapabilityUnconfigured
from signals.advisory import AdvisoryValidator, MalformedAdvisoryResponse
from signals.orchestrator import BatchOrchestrator, BatchProcessingError
from signals.service import SignalService, InvalidQuery
