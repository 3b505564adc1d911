from .user import (
    normalize_email,
    get_user,
    get_user_by_email,
    create_user,
)

from .task import (
    get_task,
    get_tasks,
    create_task,
    update_task,
    delete_task,
    get_task_stats,
)
