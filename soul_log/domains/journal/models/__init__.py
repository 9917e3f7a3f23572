from soul_log.domains.journal.models.journal_entry import JournalEntry

__all__ = ["JournalEntry"]
