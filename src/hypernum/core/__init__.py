"""
Core domain models, numeric kernel, and invariants.

Ядро не зависит от внешних источников конфигурации и не хранит
глобального изменяемого состояния.
"""
