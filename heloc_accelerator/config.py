from decimal import Decimal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "env_prefix": "HELOC_"}

    # Input bounds
    max_term_months: int = 600
    max_annual_rate_pct: Decimal = Decimal("30")
    max_amount: Decimal = Decimal("100000000")  # Any single money field

    # Sweep simulation
    max_simulation_months: int = 600  # Hard iteration ceiling (50 years)
    default_sweep_strategy: str = "chunk_draw"
    redraw_threshold: Decimal = Decimal("0")  # Draw again once the line is paid down to this
    payoff_window_pct: Decimal = Decimal("0.10")  # Draw regardless of rates near payoff
    require_rate_advantage: bool = True
    redirect_freed_payment: bool = True

    # Mortgage insurance drops off at this equity level
    pmi_removal_equity_pct: Decimal = Decimal("20")

    # App
    debug: bool = False
    log_level: str = "INFO"


settings = Settings()
