from .entity import AggregateRoot as AggregateRoot
from .entity import Entity as Entity
from .event import DomainEvent as DomainEvent
from .event import DomainEventPublisher as DomainEventPublisher
from .exception import (
    BusinessRuleViolationException as BusinessRuleViolationException,
)
from .exception import (
    DomainException as DomainException,
)
from .exception import (
    DuplicateResourceException as DuplicateResourceException,
)
from .exception import (
    OptimisticLockException as OptimisticLockException,
)
from .exception import (
    ResourceNotFoundException as ResourceNotFoundException,
)
from .repository import Repository as Repository
