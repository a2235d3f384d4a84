"""
SMS Preview Script
Render alert messages for a range of AQI levels and check their length
"""

import sys
import os
from datetime import datetime

# Add parent directory to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from config.settings import settings
from models.message_composer import compose_message

SAMPLE_POLLUTANTS = {"PM2_5": 35, "PM10": 60, "CO": 800, "NO2": 40, "SO2": 20, "O3": 30}
TEST_AQI_LEVELS = [30, 85, 120, 180, 250, 350]


def main(location: str, symptoms, conditions, age: int, temperature: float):
    now = datetime.now().replace(minute=0, second=0, microsecond=0)

    print("=" * 70)
    print(f"SMS preview for '{location}' (limit {settings.SMS_MAX_LENGTH} chars)")
    print("=" * 70)

    for aqi in TEST_AQI_LEVELS:
        composed = compose_message(
            location, now, aqi, SAMPLE_POLLUTANTS, symptoms, conditions, age, temperature
        )
        flag = " (truncated)" if composed.truncated else ""
        print(f"\nAQI {aqi} - Length: {len(composed.text)}{flag}")
        print(composed.text)
        print(f"Mask type: {composed.recommendation.mask_type}")
        print(f"Note: {composed.recommendation.note}")
        print("---")


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description='Preview BreathSafe alert SMS messages')
    parser.add_argument('--location', default='Mangalagiri, Guntur, Andhra Pradesh')
    parser.add_argument('--symptom', action='append', default=None,
                        help='Reported symptom (repeatable)')
    parser.add_argument('--condition', action='append', default=None,
                        help='Chronic condition (repeatable)')
    parser.add_argument('--age', type=int, default=45)
    parser.add_argument('--temperature', type=float, default=28)
    args = parser.parse_args()

    main(
        args.location,
        args.symptom if args.symptom is not None else ["Cough", "Shortness of breath"],
        args.condition if args.condition is not None else ["Asthma", "COPD"],
        args.age,
        args.temperature,
    )
