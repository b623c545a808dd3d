# Instant diagnosis copy for the predefined issues.
# Placeholders: {brand} is " Samsung" or "", {model} is " (ABC-123)" or "".
from typing import Dict

INSTANT_DIAGNOSES: Dict[str, Dict[str, str]] = {
    "Television": {
        "No display/black screen": (
            "Your{brand} TV{model} is experiencing a backlight failure, which is the most common cause of black screen issues. "
            "This typically occurs due to aging LED strips, power supply problems, or inverter board malfunctions. "
            "The backlight system provides illumination to the display panel, and when it fails, the screen appears completely black "
            "even though the TV may still be receiving power and audio signals. The most effective solution is to replace the LED "
            "backlight strips and check the power supply connections. This repair requires professional disassembly of the TV and "
            "specialized tools to safely handle the LED components."
        ),
        "No sound": (
            "Your{brand} TV{model} has an audio system failure that could stem from several components. The most likely causes include "
            "speaker damage from moisture or physical impact, audio board malfunctions due to power surges, or software issues affecting "
            "the sound processing. The audio system consists of speakers, audio processing chips, and amplifier circuits that work together "
            "to produce sound. The most effective solution is to first check the audio settings and perform a factory reset, then test with "
            "external speakers to isolate whether the issue is with the internal speakers or the audio processing system. If the problem "
            "persists, professional repair of the audio board or speaker replacement will be necessary."
        ),
        "Remote not working": (
            "Your{brand} TV{model} remote control issue is typically caused by infrared sensor problems, battery depletion, or signal "
            "interference. The IR receiver on the TV may be blocked by dust, damaged by physical impact, or experiencing electrical issues. "
            "Remote controls use infrared light to communicate with the TV's receiver, and any obstruction or malfunction in this system will "
            "prevent proper operation. The most effective solution is to first replace the remote batteries and clean the IR sensor on the TV "
            "with a soft cloth. If the issue persists, test with a universal remote or smartphone app to determine if the problem is with the "
            "remote or the TV's receiver. Professional repair may be needed to replace the IR receiver module."
        ),
        "Screen flickering": (
            "Your{brand} TV{model} is experiencing display flickering, which typically indicates power supply instability, backlight issues, "
            "or panel problems. Flickering occurs when the display components receive inconsistent power or when there are loose connections "
            "in the video processing chain. This can be caused by aging capacitors in the power supply, loose ribbon cable connections, or "
            "failing backlight drivers. The most effective solution is to check all cable connections and perform a power cycle reset. If "
            "flickering persists, the power supply board may need capacitor replacement or the backlight system may require professional "
            "repair. In severe cases, the display panel itself may need replacement."
        ),
        "Poor picture quality": (
            "Your{brand} TV{model} picture quality issues are often caused by panel degradation, signal processing problems, or cable "
            "connection issues. Over time, display panels can develop dead pixels, color uniformity problems, or brightness inconsistencies. "
            "The video processing system may also experience issues with color calibration, contrast adjustment, or resolution scaling. The "
            "most effective solution is to first check all input cables and connections, then access the TV's picture settings to reset to "
            "factory defaults. If problems persist, professional calibration of the display settings or replacement of the video processing "
            "board may be necessary. In cases of severe panel damage, display replacement is the only solution."
        ),
    },
    "Electric Fan": {
        "Not spinning": (
            "Your{brand} electric fan{model} motor failure is typically caused by worn bearings, capacitor problems, or electrical issues. "
            "The fan motor requires proper lubrication and electrical connections to rotate the blades. When bearings wear out, the motor "
            "cannot turn smoothly, and when capacitors fail, the motor lacks the starting torque needed to begin rotation. The most effective "
            "solution is to first check the power supply and ensure the fan is plugged in properly. If the motor still won't start, "
            "professional inspection of the bearings, capacitor, and motor windings is necessary. Motor replacement or bearing repair may be required."
        ),
        "Making noise": (
            "Your{brand} electric fan{model} noise issues are usually caused by worn bearings, loose components, or motor problems. The fan "
            "contains several moving parts including the motor, bearings, and blade assembly that can develop issues over time. Grinding, "
            "squealing, or rattling sounds typically indicate bearing wear, loose mounting hardware, or motor problems. The most effective "
            "solution is to first check for loose screws and ensure the fan is properly mounted. If noises persist, professional inspection "
            "of the bearings, motor, and mechanical components may be necessary. Bearing replacement or motor repair may be required."
        ),
        "Speed control not working": (
            "Your{brand} electric fan{model} speed control problems are typically due to faulty switches, capacitor issues, or electrical "
            "problems. The speed control system uses switches and capacitors to regulate motor speed, and when these components fail, the fan "
            "cannot change speeds or may only work on certain settings. The most effective solution is to first check the speed control "
            "switch for proper operation and ensure all connections are secure. If the speed control still doesn't work, professional "
            "inspection of the switch, capacitor, and electrical system may be necessary. Switch replacement or capacitor repair may be required."
        ),
        "Oscillation not working": (
            "Your{brand} electric fan{model} oscillation failure is usually caused by mechanical problems in the oscillation mechanism. The "
            "oscillation system uses gears and mechanical components to rotate the fan head, and when these parts wear out or become damaged, "
            "the fan cannot oscillate properly. The most effective solution is to first check if the oscillation lock is engaged and ensure "
            "the fan head can move freely. If oscillation still doesn't work, professional inspection of the oscillation mechanism, gears, and "
            "mechanical components may be necessary. Gear replacement or mechanism repair may be required."
        ),
        "Power issues": (
            "Your{brand} electric fan{model} power problems are typically caused by electrical issues, cord damage, or switch malfunctions. "
            "The electrical system includes the power cord, switch, and internal wiring that must all function properly for the fan to "
            "receive power. When these components fail, the fan cannot turn on or may have intermittent power issues. The most effective "
            "solution is to first check the power cord for damage and ensure the switch is working properly. If power issues persist, "
            "professional inspection of the electrical system, cord replacement, or switch repair may be necessary."
        ),
    },
    "Air Conditioner": {
        "Not cooling": (
            "Your{brand} air conditioner{model} cooling failure is typically caused by refrigerant leaks, compressor issues, or blocked "
            "filters. The cooling system relies on refrigerant circulation through the compressor, condenser, and evaporator coils to remove "
            "heat from the air. When refrigerant levels are low due to leaks, the system cannot effectively cool the air. Blocked air filters "
            "restrict airflow, reducing cooling efficiency and potentially causing the system to overheat. The most effective solution is to "
            "first check and replace air filters, then inspect for visible refrigerant leaks around connections. Professional service is "
            "required to test refrigerant levels, repair leaks, and recharge the system if necessary."
        ),
        "Not turning on": (
            "Your{brand} air conditioner{model} power issues are usually related to electrical problems, thermostat malfunctions, or control "
            "board failures. The electrical system includes circuit breakers, fuses, wiring connections, and control components that must all "
            "function properly for the unit to start. Power surges, loose connections, or component failures can prevent the system from "
            "receiving or processing the start command. The most effective solution is to first check the circuit breaker and ensure the "
            "thermostat is set correctly. If the unit still won't start, professional diagnosis of the electrical system, thermostat "
            "replacement, or control board repair may be necessary."
        ),
        "Making strange noises": (
            "Your{brand} air conditioner{model} unusual sounds often indicate motor problems, fan issues, or loose components. The system "
            "contains multiple moving parts including the compressor, fan motors, and blower assemblies that can develop mechanical issues "
            "over time. Grinding, squealing, or rattling noises typically indicate bearing wear, belt problems, or loose mounting hardware. The "
            "most effective solution is to first turn off the unit and check for loose panels or debris around the outdoor unit. Professional "
            "maintenance including motor lubrication, belt replacement, or component tightening may be required to resolve persistent noise issues."
        ),
        "Water leaking": (
            "Your{brand} air conditioner{model} water leakage is typically caused by clogged drain lines, improper installation, or "
            "condensation issues. Air conditioners produce condensation as they cool and dehumidify the air, and this water must be properly "
            "drained away from the unit. Clogged drain lines prevent water from flowing away, causing it to back up and leak. The most "
            "effective solution is to check and clean the drain line, ensuring it's properly sloped and free of obstructions. If leaks "
            "persist, professional inspection of the drain system and proper installation adjustments may be necessary."
        ),
        "Remote not working": (
            "Your{brand} air conditioner{model} remote control problems are usually due to signal issues, battery problems, or receiver "
            "malfunctions. The remote uses infrared or radio frequency signals to communicate with the unit's control system. Signal "
            "interference, low batteries, or damaged receivers can prevent proper communication. The most effective solution is to first "
            "replace the remote batteries and ensure the remote is pointed directly at the unit's receiver. If the problem persists, test "
            "with a universal remote or check if the unit responds to manual controls. Professional repair of the receiver module may be necessary."
        ),
    },
    "Refrigerator": {
        "Not cooling": (
            "Your{brand} refrigerator{model} cooling failure is typically caused by compressor issues, refrigerant leaks, or thermostat "
            "problems. The cooling system uses a compressor to circulate refrigerant through the evaporator and condenser coils, creating the "
            "cooling effect. When the compressor fails, refrigerant leaks, or the thermostat malfunctions, the refrigerator cannot maintain "
            "proper temperatures. The most effective solution is to first check the thermostat settings and ensure the unit is properly "
            "plugged in. If cooling issues persist, professional diagnosis of the compressor, refrigerant system, and thermostat is necessary. "
            "Compressor replacement or refrigerant system repair may be required."
        ),
        "Making loud noises": (
            "Your{brand} refrigerator{model} loud noises often indicate motor problems, fan issues, or compressor malfunctions. The "
            "refrigerator contains several mechanical components including the compressor, evaporator fan, and condenser fan that can develop "
            "issues over time. Grinding, buzzing, or rattling sounds typically indicate bearing wear, loose components, or compressor problems. "
            "The most effective solution is to first check for loose items inside the refrigerator and ensure the unit is level. If noises "
            "persist, professional inspection of the compressor, fan motors, and mechanical components may be necessary. Motor replacement or "
            "compressor repair may be required."
        ),
        "Water leaking": (
            "Your{brand} refrigerator{model} water leakage is usually caused by blocked drain lines, door seal issues, or defrost system "
            "problems. Refrigerators produce condensation that must be properly drained, and damaged door seals can allow warm air to enter, "
            "causing excessive condensation. The defrost system can also malfunction, causing ice buildup that melts and leaks. The most "
            "effective solution is to first check and clean the drain line at the bottom of the refrigerator, then inspect door seals for "
            "damage or gaps. If leaks persist, professional repair of the defrost system or door seal replacement may be necessary."
        ),
        "Ice maker not working": (
            "Your{brand} refrigerator{model} ice maker failure is typically due to water supply issues, mechanical problems, or electrical "
            "malfunctions. The ice maker requires a steady water supply, proper temperature conditions, and functioning mechanical components "
            "to produce ice. Water line blockages, frozen water lines, or mechanical component failures can prevent ice production. The most "
            "effective solution is to first check the water supply line and ensure it's not frozen or blocked. If the ice maker still doesn't "
            "work, professional inspection of the water system, mechanical components, and electrical connections may be necessary."
        ),
        "Door not sealing": (
            "Your{brand} refrigerator{model} door seal problems are usually caused by worn gaskets, misalignment, or damage. The door seal "
            "(gasket) creates an airtight seal that prevents warm air from entering and cold air from escaping. When the seal is damaged, "
            "worn, or misaligned, the refrigerator must work harder to maintain temperature, leading to energy waste and potential cooling "
            "issues. The most effective solution is to first clean the door seal and check for visible damage or gaps. If the seal is damaged "
            "or misaligned, professional replacement or adjustment of the door seal may be necessary."
        ),
    },
    "Washing Machine": {
        "Not spinning": (
            "Your{brand} washing machine{model} spin cycle failure is typically caused by motor problems, belt issues, or control board "
            "malfunctions. The spin cycle requires the motor to rotate the drum at high speed to remove water from clothes. When the motor "
            "fails, the drive belt breaks, or the control board malfunctions, the machine cannot complete the spin cycle. The most effective "
            "solution is to first check if the machine is overloaded and redistribute the load evenly. If the problem persists, professional "
            "diagnosis of the motor, drive belt, and control system may be necessary. Motor replacement or belt replacement may be required."
        ),
        "Not draining": (
            "Your{brand} washing machine{model} drainage problems are usually due to clogged pumps, blocked hoses, or pump motor failures. "
            "The drain system uses a pump to remove water from the machine during the drain and spin cycles. When the pump is clogged with "
            "debris, the drain hose is blocked, or the pump motor fails, water cannot be properly removed. The most effective solution is to "
            "first check the drain hose for kinks or blockages, then clean the pump filter if accessible. If drainage issues persist, "
            "professional cleaning of the drain system or pump replacement may be necessary."
        ),
        "Making loud noises": (
            "Your{brand} washing machine{model} loud noises often indicate bearing problems, motor issues, or loose components. The machine "
            "contains several mechanical components including the motor, transmission, and drum bearings that can develop issues over time. "
            "Grinding, squealing, or banging sounds typically indicate bearing wear, motor problems, or loose mounting hardware. The most "
            "effective solution is to first check for loose items in the drum and ensure the machine is level. If noises persist, "
            "professional inspection of the bearings, motor, and mechanical components may be necessary. Bearing replacement or motor repair "
            "may be required."
        ),
        "Not filling with water": (
            "Your{brand} washing machine{model} water supply issues are typically caused by valve problems, hose blockages, or control board "
            "malfunctions. The water inlet system includes water inlet valves, supply hoses, and control components that regulate water flow "
            "into the machine. When these components fail, the machine cannot fill with water for washing. The most effective solution is to "
            "first check the water supply valves and ensure the supply hoses are not kinked or blocked. If the machine still won't fill, "
            "professional diagnosis of the inlet valves and control system may be necessary. Valve replacement or control board repair may be required."
        ),
        "Door not locking": (
            "Your{brand} washing machine{model} door lock problems are usually due to mechanical failures, electrical issues, or safety "
            "switch malfunctions. The door lock mechanism prevents the machine from operating when the door is open and ensures safety during "
            "operation. When the lock mechanism fails, electrical connections are loose, or safety switches malfunction, the machine cannot "
            "start or may stop during operation. The most effective solution is to first check for obstructions around the door and ensure "
            "the door closes completely. If the lock still doesn't work, professional repair of the door lock mechanism or safety switch "
            "replacement may be necessary."
        ),
    },
    "Microwave": {
        "Not heating": (
            "Your{brand} microwave{model} heating failure is typically caused by magnetron problems, high voltage issues, or control board "
            "malfunctions. The magnetron is the component that generates microwave energy to heat food, and it requires high voltage power "
            "from the transformer and capacitor system. When the magnetron fails, high voltage components malfunction, or the control board "
            "doesn't send proper signals, the microwave cannot heat food. The most effective solution is to first check if the microwave is "
            "receiving power and the door closes properly. If heating issues persist, professional diagnosis of the magnetron, high voltage "
            "system, and control board is necessary. Magnetron replacement or high voltage component repair may be required."
        ),
        "Not turning on": (
            "Your{brand} microwave{model} power issues are usually related to electrical problems, fuse failures, or control board issues. "
            "The electrical system includes fuses, switches, and control components that must all function properly for the microwave to "
            "start. Power surges, loose connections, or component failures can prevent the system from receiving or processing the start "
            "command. The most effective solution is to first check the power cord and outlet, then inspect the door switches for proper "
            "operation. If the microwave still won't start, professional diagnosis of the electrical system and control board may be "
            "necessary. Fuse replacement or control board repair may be required."
        ),
        "Making strange noises": (
            "Your{brand} microwave{model} unusual sounds often indicate motor problems, fan issues, or magnetron malfunctions. The microwave "
            "contains several mechanical components including the turntable motor, cooling fan, and magnetron that can develop issues over "
            "time. Grinding, buzzing, or arcing sounds typically indicate motor wear, fan problems, or magnetron issues. The most effective "
            "solution is to first check for loose items inside the microwave and ensure the turntable rotates freely. If noises persist, "
            "professional inspection of the motors, fan, and magnetron may be necessary. Motor replacement or magnetron repair may be required."
        ),
        "Turntable not spinning": (
            "Your{brand} microwave{model} turntable problems are typically caused by motor failures, gear issues, or mechanical "
            "obstructions. The turntable motor rotates the glass plate to ensure even heating of food. When the motor fails, the drive gears "
            "wear out, or objects obstruct the turntable, it cannot rotate properly. The most effective solution is to first check for "
            "obstructions around the turntable and ensure it's properly seated. If the turntable still doesn't spin, professional inspection "
            "of the turntable motor and drive system may be necessary. Motor replacement or gear repair may be required."
        ),
        "Door not closing properly": (
            "Your{brand} microwave{model} door issues are usually due to hinge problems, latch malfunctions, or safety switch failures. The "
            "door mechanism includes hinges, latches, and safety switches that ensure proper operation and safety. When these components wear "
            "out, become misaligned, or fail, the door may not close properly or the microwave may not start. The most effective solution is "
            "to first check for obstructions around the door and ensure the hinges are properly aligned. If door problems persist, "
            "professional repair of the door mechanism or safety switch replacement may be necessary."
        ),
    },
}

GENERIC_DIAGNOSIS = (
    'Based on your {category}{brand}{model} with "{issue}", this appears to be a common issue that requires professional '
    "inspection. The symptoms suggest a technical problem that needs expert diagnosis and repair."
)
