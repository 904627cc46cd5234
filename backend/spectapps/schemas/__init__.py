from .generation import GenerationStatusResponse, CancelResponse, HistoryItem, HistoryResponse
