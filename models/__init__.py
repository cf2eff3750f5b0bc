from .topic import Topic
from .scenario import Scenario, UserScenario
