from ev_crm.core.roster.list_state import RecordListState, to_epoch

__all__ = ["RecordListState", "to_epoch"]
