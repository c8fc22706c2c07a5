# storage/__init__.py
from .app_storage import (
    # Profile
    get_user_profile,
    save_user_profile,
    get_general_resume_text,
    save_general_resume_text,

    # Application entries
    get_application_entries,
    save_application_entries,
    get_application_entry_by_id,
    upsert_application_entry,
    update_application_entry,
    delete_application_entry,

    # Maintenance
    clear_all_data,
)
