# Inbound (client -> server, acknowledged)
CREATE_ROOM = "create_room"
JOIN_ROOM = "join_room"
UPDATE_SETTINGS = "update_settings"
START_ROUND = "start_round"
SUBMIT_ANSWERS = "submit_answers"
CALL_STOP = "call_stop"
LEAVE_ROOM = "leave_room"

# Outbound (server -> one member)
ROOM_STATE = "room_state"
ROUND_RESULTS = "round_results"
