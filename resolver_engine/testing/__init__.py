from .stubs import FakeClock, ScriptedMergeService, ScriptedStep, generate_input_data

__all__ = ["FakeClock", "ScriptedMergeService", "ScriptedStep", "generate_input_data"]
