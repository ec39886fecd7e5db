import logging
import time

import numpy as np
import requests

# ========================
# CONFIGURATION
# ========================
SCALER_URL = "http://127.0.0.1:8080/scale"
DURATION_MINUTES = 40            # Length of the experiment
PERIOD_MINUTES = 10              # Sine period of the CPU load
PROBE_INTERVAL_SEC = 60          # One scaling request per polling cycle
BASE_CPU = 55                    # Mean high priority CPU (%)
AMPLITUDE = 30                   # CPU swing around the mean (%)
DEVIATION = 0.1                  # Random jitter (e.g. ±10%)

INSTANCE = {
    "projectId": "demo-project",
    "instanceId": "demo-instance",
    "units": "PROCESSING_UNITS",
    "scalingMethod": "LINEAR",
    "minSize": 100,
    "maxSize": 5000,
    "scaleOutCoolingMinutes": 5,
    "scaleInCoolingMinutes": 30,
}

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s"
)


# ========================
# LOAD GENERATOR
# ========================
def generate_cpu_load(duration_min, period_min=1, deviation=0.1):
    steps = int(duration_min * 60 / PROBE_INTERVAL_SEC)
    total_periods = duration_min / period_min

    base = BASE_CPU + AMPLITUDE * np.sin(np.linspace(0, 2 * np.pi * total_periods, steps))
    noise = (np.random.rand(steps) - 0.5) * 2 * deviation
    return np.clip(base * (1 + noise), 0, 100).round(1).tolist()


# ========================
# SIMULATION
# ========================
def run_simulation(cpu_series, start_size=1000):
    size = start_size
    for i, cpu in enumerate(cpu_series):
        # load spreads over capacity: the same demand on a bigger instance shows lower CPU
        observed = min(100.0, cpu * start_size / size)
        body = dict(INSTANCE, currentSize=size, isOverloaded=observed > 90,
                    metrics=[{"name": "high_priority_cpu", "value": observed}])

        try:
            r = requests.post(SCALER_URL, json=body, timeout=10)
            decision = r.json()
            logging.info(f"[{i + 1}/{len(cpu_series)}] cpu={observed:.1f}% size={size} "
                         f"-> {decision.get('outcome', decision.get('error'))}")
            if decision.get("outcome") == "DONE":
                size = decision["suggestedSize"]
        except (requests.RequestException, ValueError) as e:
            logging.error(f"Scaling request failed: {e}")

        if i < len(cpu_series) - 1:
            time.sleep(PROBE_INTERVAL_SEC)


# ========================
# ENTRYPOINT
# ========================
if __name__ == "__main__":
    logging.info("Generating CPU load pattern...")
    pattern = generate_cpu_load(
        duration_min=DURATION_MINUTES,
        period_min=PERIOD_MINUTES,
        deviation=DEVIATION,
    )
    logging.info(f"Generated {len(pattern)} probes")
    run_simulation(pattern)
