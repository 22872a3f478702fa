"""Server-side merge of submitted guide blocks against stored records."""

from collections.abc import Iterable

from .model import BlockRecord, MergePlan


def plan_merge(existing_ids: Iterable[int], records: Iterable[BlockRecord]) -> MergePlan:
    """
    Decide what a save does to the stored blocks of one guide.

    - record with an id that exists -> update in place
    - record without an id -> insert
    - stored id no record refers to -> delete
    - record with an id that does not exist -> ignored (never re-created)
    """
    existing = list(dict.fromkeys(existing_ids))
    known = set(existing)
    plan = MergePlan()
    referenced: set[int] = set()

    for record in records:
        if record.id is None:
            plan.insert.append(record)
        elif record.id in known:
            plan.update.append(record)
            referenced.add(record.id)
        else:
            plan.ignored.append(record)

    plan.delete = [i for i in existing if i not in referenced]
    return plan
